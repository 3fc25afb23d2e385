from pathlib import Path

import pytest

from apidoc_openapi.parser.apidoc import (
    ApidocLoadError,
    parse_apidoc,
    parse_project,
    read_header_description,
)
from apidoc_openapi.parser.base import ProjectInfo
from apidoc_openapi.parser.detect import detect_format, unwrap_define

FIXTURES = Path(__file__).parent / "fixtures"


class TestDetectFormat:
    def test_detect_json(self):
        assert detect_format(FIXTURES / "api_data.json") == "json"

    def test_detect_legacy_js(self):
        assert detect_format(FIXTURES / "api_data.js") == "js"

    def test_unwrap_define(self):
        assert unwrap_define('define({ "a": 1 });') == '{ "a": 1 }'
        assert unwrap_define('[1, 2]') == '[1, 2]'


class TestApidocParser:
    def test_parse_records_count(self):
        records = parse_apidoc(FIXTURES / "api_data.json")
        assert len(records) == 7

    def test_parse_get_user(self):
        records = parse_apidoc(FIXTURES / "api_data.json")
        get_user = records[0]
        assert get_user.verb == "get"
        assert get_user.url == "/users/:id"
        assert get_user.version == "1.0.0"
        assert get_user.parameter.bucket("Parameter")[0].type == "Number"
        assert len(get_user.success.examples) == 1

    def test_parse_legacy_js(self):
        records = parse_apidoc(FIXTURES / "api_data.js")
        assert len(records) == 1
        assert records[0].url == "/ping"

    def test_not_a_list(self, tmp_path):
        f = tmp_path / "api_data.json"
        f.write_text('{"type": "get"}')
        with pytest.raises(ApidocLoadError, match="expected a list"):
            parse_apidoc(f)

    def test_invalid_json(self, tmp_path):
        f = tmp_path / "api_data.json"
        f.write_text("[{")
        with pytest.raises(ApidocLoadError, match="invalid JSON"):
            parse_apidoc(f)

    def test_malformed_record_names_index(self, tmp_path):
        f = tmp_path / "api_data.json"
        f.write_text('[{"type": "get", "url": "/a"}, {"type": "get"}]')
        with pytest.raises(ApidocLoadError, match="record #1"):
            parse_apidoc(f)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ApidocLoadError):
            parse_apidoc(tmp_path / "nope.json")


class TestProjectParser:
    def test_parse_json_project(self):
        project = parse_project(FIXTURES / "api_project.json")
        assert project.display_title == "Users Service"
        assert project.url == "/api"
        assert project.header.filename == "header.md"

    def test_parse_yaml_project(self):
        project = parse_project(FIXTURES / "project.yaml")
        assert project.version == "3.1.0"
        assert project.url == "/v3"

    def test_project_not_an_object(self, tmp_path):
        f = tmp_path / "api_project.json"
        f.write_text("[]")
        with pytest.raises(ApidocLoadError):
            parse_project(f)

    def test_read_header_description(self):
        project = parse_project(FIXTURES / "api_project.json")
        text = read_header_description(project, FIXTURES)
        assert text.startswith("# Users Service")

    def test_no_header(self):
        assert read_header_description(ProjectInfo(name="svc"), FIXTURES) is None

    def test_missing_header_file(self, tmp_path):
        project = ProjectInfo.model_validate({"name": "svc", "header": {"filename": "missing.md"}})
        with pytest.raises(ApidocLoadError, match="header file"):
            read_header_description(project, tmp_path)
