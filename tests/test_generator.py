"""Tests for the single-file generation chain."""

from __future__ import annotations

from pathlib import Path

from protowatch.generator import SchemaGenerator
from protowatch.models import Completion


def test_generate_writes_schema_and_returns_completion(config, write_go) -> None:
    source = write_go(
        "models/users.go",
        """
        package models

        type LoginRequest struct {
            Email string `json:"email"`
        }

        type LoginResponse struct {
            Token string
        }
        """,
    )
    generator = SchemaGenerator.from_config(config)

    completion = generator.generate(generator.job_for(source))

    assert completion == Completion(base_name="users", output_dir=config.out_folder)
    document = (config.out_folder / "users.proto").read_text(encoding="utf-8")
    assert "message LoginRequest {\n  string email = 1;\n}\n" in document
    assert "rpc Login(LoginRequest) returns (LoginResponse);" in document


def test_generate_skips_files_without_structs(config, write_go) -> None:
    source = write_go("models/helpers.go", "package models\n\nfunc Noop() {}\n")
    generator = SchemaGenerator.from_config(config)

    assert generator.generate(generator.job_for(source)) is None
    assert list(config.out_folder.iterdir()) == []


def test_generate_abandons_unparseable_and_missing_files(config, write_go, tmp_path: Path) -> None:
    broken = write_go("models/broken.go", "package models\n\ntype Broken struct {\n")
    generator = SchemaGenerator.from_config(config)

    assert generator.generate(generator.job_for(broken)) is None
    assert generator.generate(generator.job_for(tmp_path / "models" / "gone.go")) is None
    assert list(config.out_folder.iterdir()) == []


def test_generate_reports_unwritable_output(config, write_go, tmp_path: Path) -> None:
    source = write_go("models/foo.go", "package models\n\ntype Foo struct {\n\tA int\n}\n")
    generator = SchemaGenerator(tmp_path / "does-not-exist")

    assert generator.generate(generator.job_for(source)) is None


def test_job_for_derives_schema_path(config) -> None:
    generator = SchemaGenerator.from_config(config)
    job = generator.job_for(config.watch_folder / "users.go")

    assert job.base_name == "users"
    assert job.schema_path == config.out_folder / "users.proto"
