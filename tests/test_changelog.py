import pathlib
import re

import vacompare

CHANGELOG = pathlib.Path(__file__).resolve().parents[1] / "CHANGELOG.md"


def test_changelog_has_entries():
    assert CHANGELOG.exists(), "CHANGELOG.md should exist"
    lines = CHANGELOG.read_text().splitlines()
    assert any(line.strip().startswith("- ") for line in lines)


def test_latest_changelog_heading_matches_package_version():
    headings = re.findall(r"^## (\S+)", CHANGELOG.read_text(), flags=re.MULTILINE)
    assert headings, "CHANGELOG.md should have a version heading"
    assert headings[0] == vacompare.__version__
