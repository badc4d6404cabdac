"""
Unit tests for asset URL to filesystem path resolution.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from browser_security.integrity.errors import FileNotExistsError, InvalidPathError
from browser_security.integrity.paths import (
    is_absolute_path,
    resolve_asset_path,
    select_root,
    split_local_path,
)

SITE_URL = "https://example.com/"


def _resolve(src: str, web_root: Path, root_dir: Path | None = None) -> str | None:
    return resolve_asset_path(
        src,
        site_url=SITE_URL,
        web_root=str(web_root),
        root_dir=str(root_dir) if root_dir else None,
        handle="asset",
    )


class TestLocalDetection:
    def test_remote_asset_is_skipped(self, web_root: Path) -> None:
        assert _resolve("https://cdn.example.net/lib.js", web_root) is None

    def test_other_scheme_is_skipped(self, web_root: Path) -> None:
        assert _resolve("http://example.com/wp-includes/js/jquery.js", web_root) is None

    def test_lookalike_host_is_skipped(self, web_root: Path) -> None:
        assert _resolve("https://example.com.evil.test/app.js", web_root) is None

    def test_query_is_discarded(self) -> None:
        assert split_local_path("https://example.com/a/b.js?ver=1.2", SITE_URL) == "a/b.js"

    def test_site_url_without_trailing_slash(self) -> None:
        assert split_local_path("https://example.com/a.js", "https://example.com") == "a.js"


class TestTraversalDefense:
    @pytest.mark.parametrize(
        "src",
        [
            "https://example.com/../secret.js",
            "https://example.com/wp-content/../../secret.js",
            "https://example.com/wp-content/themes/..\\..\\secret.js",
            "https://example.com//etc/passwd",
            "https://example.com/C:/Windows/win.ini",
            "https://example.com/\\server\\share\\x.js",
        ],
    )
    def test_rejected_before_filesystem_access(self, web_root: Path, src: str) -> None:
        with pytest.raises(InvalidPathError) as exc_info:
            _resolve(src, web_root)
        assert exc_info.value.handle == "asset"
        assert exc_info.value.src == src

    def test_rejected_even_when_target_exists(self, web_root: Path) -> None:
        (web_root.parent / "secret.js").write_text("secret")
        with pytest.raises(InvalidPathError):
            _resolve("https://example.com/wp-content/../../secret.js", web_root)

    def test_traversal_rejected_with_query(self, web_root: Path) -> None:
        with pytest.raises(InvalidPathError):
            _resolve("https://example.com/../x.js?ver=1", web_root)

    def test_is_absolute_path(self) -> None:
        assert is_absolute_path("/etc/passwd")
        assert is_absolute_path("D:\\file.js")
        assert is_absolute_path("php://filter/resource=x")
        assert not is_absolute_path("wp-content/app.js")


class TestResolution:
    @pytest.mark.parametrize(
        ("rel_path", "exists"),
        [
            ("wp-content/themes/site/app.js", True),
            ("wp-content/themes/site/style.css", True),
            ("wp-includes/js/jquery.js", True),
            ("wp-content/themes/site/missing.js", False),
            ("nowhere/app.js", False),
        ],
    )
    def test_resolves_iff_file_exists(self, web_root: Path, rel_path: str, exists: bool) -> None:
        src = SITE_URL + rel_path
        if exists:
            assert _resolve(src, web_root) == os.path.join(str(web_root), rel_path)
        else:
            with pytest.raises(FileNotExistsError):
                _resolve(src, web_root)

    def test_versioned_url_resolves(self, web_root: Path) -> None:
        path = _resolve(SITE_URL + "wp-includes/js/jquery.js?ver=3.7.1", web_root)
        assert path == os.path.join(str(web_root), "wp-includes", "js", "jquery.js")

    @pytest.mark.parametrize(
        "rel_path",
        ["", "wp-content/themes/site", "wp-content/themes/site/", "wp-includes/js/"],
    )
    def test_directory_is_not_a_file(self, web_root: Path, rel_path: str) -> None:
        with pytest.raises(FileNotExistsError):
            _resolve(SITE_URL + rel_path, web_root)


class TestRootSelection:
    def test_web_root_with_marker(self, web_root: Path) -> None:
        assert select_root("app.js", str(web_root)) == str(web_root)

    def test_parent_without_marker(self, tmp_path: Path) -> None:
        web_root = tmp_path / "project" / "wordpress"
        web_root.mkdir(parents=True)
        assert select_root("content/app.js", str(web_root)) == str(tmp_path / "project")

    def test_explicit_root_dir_preferred(self, web_root: Path, tmp_path: Path) -> None:
        assert select_root("content/app.js", str(web_root), str(tmp_path)) == str(tmp_path)

    def test_core_prefix_forced_to_web_root(self, web_root: Path, tmp_path: Path) -> None:
        assert select_root("wp-includes/js/jquery.js", str(web_root), str(tmp_path)) == str(
            web_root
        )

    def test_split_install_layout(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        web_root = project / "wordpress"
        (web_root / "wp-includes").mkdir(parents=True)
        (web_root / "wp-includes" / "core.js").write_text("core")
        (project / "content").mkdir()
        (project / "content" / "app.js").write_text("app")

        expected = str(project / "content" / "app.js")
        assert _resolve(SITE_URL + "content/app.js", web_root) == expected
        assert _resolve(SITE_URL + "wp-includes/core.js", web_root) == str(
            web_root / "wp-includes" / "core.js"
        )
