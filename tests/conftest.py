"""Shared fixtures: keep the user's environment out of settings"""

import os

import pytest

from pulpmd.config.settings import AppSettings


@pytest.fixture(autouse=True)
def settings_isolate(tmp_path, monkeypatch):
    """No PULPMD_* variables, no .env, no ~/.pulpMd.yaml"""
    for name in list(os.environ):
        if name.upper().startswith("PULPMD_"):
            monkeypatch.delenv(name)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setitem(AppSettings.model_config, "yaml_file", tmp_path / "absent.yaml")


@pytest.fixture
def snippet_dir(tmp_path):
    """Snippet directory shared by the end-to-end tests"""
    root = tmp_path / "snippets"
    root.mkdir()
    (root / "hello.go").write_text('package main\n\nfunc main() { println("hi") }\n')
    (root / "hello.json").write_text('{"greeting": "hi"}\n')
    (root / "hello.sh").write_text("echo hi\n")
    (root / "intro.md").write_text("## Intro\n\nSome *text*.\n")
    return root
