"""
Tests for the feature state machine (mcmod add).
"""

import json

import pytest

from mcmod.descriptor import load_descriptor
from mcmod.exceptions import AlreadyEnabledError, ConfigNotFoundError, McmodError
from mcmod.features import VALID_FEATURES, add_feature, build_vars
from mcmod.mutation.ledger import IntentLedger


def _read(root, name):
    return (root / name).read_text(encoding="utf-8")


class TestAddLoader:

    def test_add_neoforge(self, sample_project):
        add_feature("neoforge", sample_project)

        descriptor = load_descriptor(sample_project)
        assert descriptor.loaders.fabric is True
        assert descriptor.loaders.neoforge is True

        settings = _read(sample_project, "settings.gradle").splitlines()
        assert settings.index('include("neoforge")') == settings.index('include("fabric")') + 1
        assert "enabled_platforms=fabric,neoforge" in _read(sample_project, "gradle.properties").splitlines()

        neoforge = sample_project / "neoforge"
        assert (neoforge / "build.gradle").exists()
        assert (neoforge / "src/main/resources/META-INF/neoforge.mods.toml").exists()
        source = neoforge / "src/main/java/com/example/testmod/neoforge/TestmodModNeoForge.java"
        assert "class TestmodModNeoForge" in source.read_text(encoding="utf-8")

        assert not (sample_project / ".mcmod").exists()

    def test_mods_toml_uses_neoforge_major(self, sample_project):
        add_feature("neoforge", sample_project)
        mods_toml = _read(sample_project, "neoforge/src/main/resources/META-INF/neoforge.mods.toml")
        assert 'versionRange = "[21.4,)"' in mods_toml

    def test_already_enabled_touches_nothing(self, sample_project):
        before = {
            name: (sample_project / name).read_bytes()
            for name in ("mcmod.toml", "settings.gradle", "gradle.properties")
        }

        with pytest.raises(AlreadyEnabledError) as exc:
            add_feature("fabric", sample_project)

        assert exc.value.feature == "fabric"
        for name, content in before.items():
            assert (sample_project / name).read_bytes() == content
        assert not (sample_project / ".mcmod").exists()


class TestAddCi:

    def test_add_ci(self, sample_project):
        add_feature("ci", sample_project)

        assert load_descriptor(sample_project).features.ci is True
        assert (sample_project / ".github/workflows/build.yml").exists()

    def test_add_ci_twice(self, sample_project):
        add_feature("ci", sample_project)
        with pytest.raises(AlreadyEnabledError):
            add_feature("ci", sample_project)


class TestDispatch:

    def test_unknown_feature(self, sample_project):
        with pytest.raises(McmodError, match="Valid features: fabric, neoforge, ci, kotlin"):
            add_feature("forge", sample_project)

    def test_valid_features(self):
        assert VALID_FEATURES == ("fabric", "neoforge", "ci", "kotlin")

    def test_no_descriptor(self, temp_dir):
        with pytest.raises(ConfigNotFoundError):
            add_feature("ci", temp_dir)

    def test_build_vars_before_change(self, sample_project):
        variables = build_vars(load_descriptor(sample_project))
        assert variables["enabled_platforms"] == "fabric"
        assert variables["class_name"] == "TestmodMod"
        assert variables["package_path"] == "com/example/testmod"
        assert variables["neoforge_major"] == "21.4"


class TestInterruptedAdd:
    """A failure part-way leaves the flag unset; re-running converges."""

    def test_failure_leaves_flag_unset_and_intent(self, sample_project, monkeypatch):
        def fail(project_root, platform):
            raise OSError("disk full")

        with monkeypatch.context() as m:
            m.setattr("mcmod.features.add_platform_to_gradle_properties", fail)
            with pytest.raises(OSError, match="disk full"):
                add_feature("neoforge", sample_project)

        assert load_descriptor(sample_project).loaders.neoforge is False
        intent = json.loads(_read(sample_project, ".mcmod/intent.json"))
        assert intent["feature"] == "neoforge"
        assert intent["steps"] == ["files", "settings.gradle"]

    def test_rerun_converges(self, sample_project, monkeypatch):
        def fail(project_root, platform):
            raise OSError("disk full")

        with monkeypatch.context() as m:
            m.setattr("mcmod.features.add_platform_to_gradle_properties", fail)
            with pytest.raises(OSError):
                add_feature("neoforge", sample_project)

        add_feature("neoforge", sample_project)

        assert load_descriptor(sample_project).loaders.neoforge is True
        assert _read(sample_project, "settings.gradle").count('include("neoforge")') == 1
        assert "enabled_platforms=fabric,neoforge" in _read(sample_project, "gradle.properties")
        assert not (sample_project / ".mcmod").exists()


class TestIntentLedger:

    def test_begin_reports_stale_record(self, temp_dir):
        first = IntentLedger(temp_dir)
        assert first.begin("fabric") is None
        first.record_step("files")

        stale = IntentLedger(temp_dir).begin("ci")

        assert stale["feature"] == "fabric"
        assert stale["steps"] == ["files"]

    def test_unreadable_record(self, temp_dir):
        state_dir = temp_dir / ".mcmod"
        state_dir.mkdir()
        (state_dir / "intent.json").write_text("{not json", encoding="utf-8")

        assert IntentLedger(temp_dir).read() == {"feature": None, "steps": []}

    def test_complete_keeps_other_state_files(self, temp_dir):
        ledger = IntentLedger(temp_dir)
        ledger.begin("ci")
        (temp_dir / ".mcmod" / "notes.txt").write_text("keep", encoding="utf-8")

        ledger.complete()

        assert not ledger.path.exists()
        assert (temp_dir / ".mcmod" / "notes.txt").exists()

    def test_record_step_requires_begin(self, temp_dir):
        with pytest.raises(RuntimeError):
            IntentLedger(temp_dir).record_step("files")
