"""Pytest configuration and fixtures."""
import os
from pathlib import Path

import pytest

from consolesweep.engine.models import Occurrence, PromptChoice
from consolesweep.utils.error_handler import set_error_log_enabled

APP_JS = '''import { fetchUser } from "./api";

export async function loadUser(id) {
  console.log("loading user");
  try {
    const user = await fetchUser(id);
    console.log("apiKey:", apiKey);
    return user;
  } catch (err) {
    console.log("failed to load", err);
  }
  // console.log("old debug");
  const label = id ? console.log("has id") : "none";
  return label;
}
'''

APP_JS_AUTO = '''import { fetchUser } from "./api";

export async function loadUser(id) {
  try {
    const user = await fetchUser(id);
    console.log("apiKey:", apiKey);
    return user;
  } catch (err) {
    console.error("failed to load", err);
  }
  const label = id ? console.log("has id") : "none";
  return label;
}
'''

NOISE_JS = '''export const add = (a, b) => a + b;
console.log("module loaded");
'''


class FakePrompter:
    """Scripted stand-in for the interactive console prompter."""

    def __init__(self, choices=None, confirms=None):
        self.choices = list(choices or [])
        self.confirms = list(confirms or [])
        self.prompted: list[int] = []
        self.confirmed: list[str] = []
        self.progress: list[tuple[int, int, str]] = []

    def prompt(self, occurrence: Occurrence, file_path: str) -> PromptChoice:
        self.prompted.append(occurrence.line_number)
        if not self.choices:
            return PromptChoice.KEEP
        return self.choices.pop(0)

    def confirm(self, message: str) -> bool:
        self.confirmed.append(message)
        if not self.confirms:
            return True
        return self.confirms.pop(0)

    def show_progress(self, current: int, total: int, file_path: str) -> None:
        self.progress.append((current, total, file_path))


@pytest.fixture
def fake_prompter():
    """Factory for scripted prompters."""
    return FakePrompter


@pytest.fixture
def sample_project(tmp_path) -> Path:
    """Minimal JS/TS project with debug statements in several contexts."""
    project_path = tmp_path / "project"
    (project_path / "src").mkdir(parents=True)
    (project_path / "lib").mkdir()
    (project_path / "node_modules" / "dep").mkdir(parents=True)

    (project_path / "src" / "app.js").write_text(APP_JS, encoding="utf-8")
    (project_path / "lib" / "noise.js").write_text(NOISE_JS, encoding="utf-8")
    (project_path / "src" / "types.ts").write_text("export type Id = string;\n", encoding="utf-8")
    (project_path / "node_modules" / "dep" / "index.js").write_text('console.log("vendored");\n', encoding="utf-8")
    (project_path / "README.md").write_text("console.log('not code')\n", encoding="utf-8")

    return project_path


@pytest.fixture(autouse=True)
def _isolated_state(tmp_path, monkeypatch):
    """Keep env overrides and the error log out of the real working tree."""
    for key in list(os.environ):
        if key.startswith("CONSOLESWEEP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    set_error_log_enabled(True)
