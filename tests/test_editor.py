"""
Unit tests for the text patch primitives and TextPatcher.
"""

import pytest

from mcmod.mutation.editor import (
    TextPatcher,
    add_to_list_property,
    detect_line_ending,
    insert_unique_line,
    upsert_key,
)

SETTINGS = 'pluginManagement {\n}\n\ninclude("common")\nrootProject.name = "testmod"\n'


class TestInsertUniqueLine:
    """Anchor rules and idempotence of insert_unique_line."""

    def test_inserts_after_last_matching_line(self):
        content = 'include("common")\ninclude("fabric")\nrootProject.name = "x"\n'
        result = insert_unique_line(content, 'include("neoforge")', "include(", "rootProject.name")
        assert result == (
            'include("common")\ninclude("fabric")\ninclude("neoforge")\nrootProject.name = "x"\n'
        )

    def test_falls_back_to_before_anchor(self):
        content = 'pluginManagement {\n}\nrootProject.name = "x"\n'
        result = insert_unique_line(content, 'include("fabric")', "include(", "rootProject.name")
        assert result == 'pluginManagement {\n}\ninclude("fabric")\nrootProject.name = "x"\n'

    def test_appends_when_no_anchor_matches(self):
        result = insert_unique_line("a\nb\n", "new", "zzz", "yyy")
        assert result == "a\nb\nnew\n"

    def test_prefix_matches_ignore_indentation(self):
        content = '    include("common")\nrootProject.name = "x"\n'
        result = insert_unique_line(content, 'include("fabric")', "include(")
        assert result.splitlines()[1] == 'include("fabric")'

    def test_no_op_when_line_present(self):
        result = insert_unique_line(SETTINGS, 'include("common")', "include(", "rootProject.name")
        assert result == SETTINGS

    def test_idempotent(self):
        once = insert_unique_line(SETTINGS, 'include("fabric")', "include(", "rootProject.name")
        twice = insert_unique_line(once, 'include("fabric")', "include(", "rootProject.name")
        assert once == twice
        assert twice.count('include("fabric")') == 1

    @pytest.mark.parametrize("order", [("fabric", "neoforge"), ("neoforge", "fabric")])
    def test_insertion_order_is_preserved(self, order):
        content = SETTINGS
        for module in order:
            content = insert_unique_line(content, f'include("{module}")', "include(", "rootProject.name")

        lines = content.splitlines()
        for module in ("common", "fabric", "neoforge"):
            assert lines.count(f'include("{module}")') == 1
        assert lines.index(f'include("{order[0]}")') < lines.index(f'include("{order[1]}")')
        assert lines[-1] == 'rootProject.name = "testmod"'

    def test_preserves_crlf(self):
        content = 'include("common")\r\nrootProject.name = "x"\r\n'
        result = insert_unique_line(content, 'include("fabric")', "include(")
        assert result == 'include("common")\r\ninclude("fabric")\r\nrootProject.name = "x"\r\n'

    def test_preserves_missing_trailing_newline(self):
        result = insert_unique_line("a\nb", "c", "b")
        assert result == "a\nb\nc"


class TestUpsertKey:
    """Replace-or-append semantics of upsert_key."""

    def test_replaces_in_place(self):
        assert upsert_key("a=1\nb=2\nc=3\n", "b", "9") == "a=1\nb=9\nc=3\n"

    def test_reenables_commented_key(self):
        content = "x=1\n# mod_language=kotlin\ny=2\n"
        assert upsert_key(content, "mod_language", "kotlin") == "x=1\nmod_language=kotlin\ny=2\n"

    def test_appends_missing_key(self):
        assert upsert_key("a=1\n", "kotlin_version", "2.1.0") == "a=1\nkotlin_version=2.1.0\n"

    def test_only_first_match_replaced(self):
        assert upsert_key("a=1\na=2\n", "a", "9") == "a=9\na=2\n"

    def test_key_prefix_does_not_match_longer_key(self):
        assert upsert_key("ab=1\n", "a", "2") == "ab=1\na=2\n"

    def test_idempotent(self):
        once = upsert_key("a=1\n", "b", "2")
        assert upsert_key(once, "b", "2") == once

    def test_mixed_endings_only_target_line_changes(self):
        content = "a=1\x0cx\nkey=old\nb=2\r\n"
        assert upsert_key(content, "key", "new") == "a=1\x0cx\nkey=new\nb=2\r\n"

    def test_replaced_line_keeps_its_own_terminator(self):
        content = "a=1\nkey=old\r\nb=2\n"
        assert upsert_key(content, "key", "new") == "a=1\nkey=new\r\nb=2\n"

    def test_lone_carriage_return_is_not_a_line_break(self):
        content = "note=x\ry\nkey=old\n"
        assert upsert_key(content, "key", "new") == "note=x\ry\nkey=new\n"


class TestAddToListProperty:
    """Comma-separated set semantics of add_to_list_property."""

    def test_appends_token(self):
        content = "enabled_platforms=fabric\n"
        assert add_to_list_property(content, "enabled_platforms", "neoforge") == (
            "enabled_platforms=fabric,neoforge\n"
        )

    def test_existing_token_is_no_op(self):
        content = "enabled_platforms=fabric,neoforge\n"
        assert add_to_list_property(content, "enabled_platforms", "fabric") == content

    def test_trims_and_drops_empty_tokens(self):
        content = "enabled_platforms= fabric , ,\n"
        assert add_to_list_property(content, "enabled_platforms", "neoforge") == (
            "enabled_platforms=fabric,neoforge\n"
        )

    def test_empty_value(self):
        assert add_to_list_property("enabled_platforms=\n", "enabled_platforms", "fabric") == (
            "enabled_platforms=fabric\n"
        )

    def test_missing_key_is_appended(self):
        assert add_to_list_property("a=1\n", "enabled_platforms", "fabric") == (
            "a=1\nenabled_platforms=fabric\n"
        )

    def test_other_lines_untouched(self):
        content = "# comment\nenabled_platforms=fabric\nminecraft_version=1.21.4\n"
        result = add_to_list_property(content, "enabled_platforms", "neoforge")
        assert result == "# comment\nenabled_platforms=fabric,neoforge\nminecraft_version=1.21.4\n"

    def test_mixed_endings_untouched(self):
        content = "\u2028# note\r\nenabled_platforms=fabric\nversion=1\r\n"
        assert add_to_list_property(content, "enabled_platforms", "neoforge") == (
            "\u2028# note\r\nenabled_platforms=fabric,neoforge\nversion=1\r\n"
        )


class TestTextPatcher:
    """File-level patching."""

    def test_detect_line_ending(self):
        assert detect_line_ending("a\nb") == "\n"
        assert detect_line_ending("a\r\nb") == "\r\n"
        assert detect_line_ending("a\nb\r\n") == "\n"
        assert detect_line_ending("a") == "\n"

    def test_patch_file_reports_change(self, temp_dir):
        path = temp_dir / "gradle.properties"
        path.write_text("a=1\n", encoding="utf-8")

        patcher = TextPatcher()
        assert patcher.upsert_key(path, "b", "2") is True
        assert path.read_text(encoding="utf-8") == "a=1\nb=2\n"
        assert patcher.upsert_key(path, "b", "2") is False

    def test_patch_file_keeps_crlf_on_disk(self, temp_dir):
        path = temp_dir / "gradle.properties"
        path.write_bytes(b"enabled_platforms=fabric\r\n")

        TextPatcher().add_to_list_property(path, "enabled_platforms", "neoforge")

        assert path.read_bytes() == b"enabled_platforms=fabric,neoforge\r\n"

    def test_no_temp_files_left(self, temp_dir):
        path = temp_dir / "settings.gradle"
        path.write_text(SETTINGS, encoding="utf-8")

        TextPatcher().insert_unique_line(path, 'include("fabric")', "include(")

        assert [p.name for p in temp_dir.iterdir()] == ["settings.gradle"]

    def test_missing_file_raises(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            TextPatcher().upsert_key(temp_dir / "missing.properties", "a", "1")
