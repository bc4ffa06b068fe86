"""Tests for Java runtime candidates and selection."""

import os
from unittest.mock import MagicMock

import pytest

from common.errors import JavaNotFoundError, RuntimeScanError
from runtime.models import RuntimeCandidate
from runtime.selector import get_java_home, probe_search_path, rank_candidates, select_java_home

java8_jdk = RuntimeCandidate("/path/to/java8jdk", (1, 8, 0), 1, True)
java8_jre = RuntimeCandidate("/path/to/java8jre", (1, 8, 0), 1, False)
java11_jdk = RuntimeCandidate("/path/to/java11jdk", (1, 11, 0), 1, True)
java11_jre = RuntimeCandidate("/path/to/java11jre", (1, 11, 0), 1, False)
java17_jdk = RuntimeCandidate("/path/to/java17jdk", (1, 17, 0), 1, True)
java11_jdk_new_patch = RuntimeCandidate("/path/to/java11jdk/high/security", (1, 11, 0), 192, True)


class FakeProbe:
    """Filesystem probe over a dict of link -> target (None means unresolvable)."""

    def __init__(self, links):
        self.links = links

    def exists(self, path):
        return path in self.links

    def resolve_link(self, path):
        target = self.links[path]
        if target is None:
            raise OSError("dangling link")
        return target


class TestRanking:
    """JDK first, then newest release, then highest security patch."""

    def test_falls_back_to_installed_java(self):
        assert select_java_home(None, None, None, [java8_jdk, java11_jdk]) == java11_jdk.install_path

    def test_prefers_jdk_over_jre(self):
        assert select_java_home(None, None, None, [java11_jre, java8_jdk, java8_jre]) == java8_jdk.install_path

    def test_prefers_most_recent_jdk_11(self):
        assert select_java_home(None, None, None, [java11_jdk, java8_jdk, java8_jre]) == java11_jdk.install_path

    def test_prefers_most_recent_jdk_17(self):
        candidates = [java17_jdk, java11_jdk, java8_jdk, java8_jre]
        assert select_java_home(None, None, None, candidates) == java17_jdk.install_path

    def test_prefers_most_recent_security_patch(self):
        candidates = [java11_jdk, java11_jdk_new_patch, java8_jre]
        assert select_java_home(None, None, None, candidates) == java11_jdk_new_patch.install_path

    def test_ties_keep_scan_order(self):
        first = RuntimeCandidate("/a", (11, 0, 2), 2, True)
        second = RuntimeCandidate("/b", (11, 0, 2), 2, True)
        assert rank_candidates([first, second]) == [first, second]
        assert rank_candidates([second, first]) == [second, first]

    def test_full_ranking(self):
        ranked = rank_candidates([java8_jre, java11_jre, java8_jdk, java11_jdk_new_patch, java11_jdk])
        assert ranked == [java11_jdk_new_patch, java11_jdk, java8_jdk, java11_jre, java8_jre]


class TestResolutionOrder:
    """Explicit setting, then environment, then search path, then scan."""

    def test_reads_from_configuration(self):
        assert select_java_home("/path/to/java", None, None, []) == "/path/to/java"

    def test_reads_from_environment(self):
        assert select_java_home(None, "/path/to/java", None, []) == "/path/to/java"

    def test_prefers_configuration_to_environment_and_installed(self):
        result = select_java_home("/path/to/config/java", "/path/to/java", None, [java8_jdk, java11_jdk])
        assert result == "/path/to/config/java"

    def test_search_path_beats_scan(self):
        assert select_java_home(None, None, "/opt/jdk", [java17_jdk]) == "/opt/jdk"

    def test_nothing_found_raises(self):
        with pytest.raises(JavaNotFoundError):
            select_java_home(None, "", None, [])


class TestProbeSearchPath:
    """Linked java launchers on PATH point at an installation."""

    def test_resolves_linked_launcher(self):
        probe = FakeProbe({os.path.join("/usr/bin", "java"): "/usr/lib/jvm/jdk-17/bin/java"})
        home = probe_search_path(["/usr/local/bin", "/usr/bin"], probe, ["java"])
        assert home == "/usr/lib/jvm/jdk-17"

    def test_launcher_that_is_not_a_link_is_skipped(self):
        launcher = os.path.join("/opt/jdk/bin", "java")
        probe = FakeProbe({launcher: launcher})
        assert probe_search_path(["/opt/jdk/bin"], probe, ["java"]) is None

    def test_unresolvable_link_is_skipped(self):
        probe = FakeProbe({
            os.path.join("/broken", "java"): None,
            os.path.join("/usr/bin", "java"): "/usr/lib/jvm/jdk-11/bin/java",
        })
        assert probe_search_path(["/broken", "/usr/bin"], probe, ["java"]) == "/usr/lib/jvm/jdk-11"

    def test_empty_entries_are_ignored(self):
        assert probe_search_path(["", ""], FakeProbe({}), ["java"]) is None


class TestGetJavaHome:
    """Session-level resolution from explicit parameters."""

    def test_setting_wins_without_scanning(self):
        scanner = MagicMock()
        result = get_java_home("/cfg/java", environ={"JAVA_HOME": "/env/java"}, scanner=scanner)
        assert result == "/cfg/java"
        scanner.assert_not_called()

    def test_environment_variable_used(self):
        assert get_java_home(None, environ={"JAVA_HOME": "/env/java"}, scanner=MagicMock()) == "/env/java"

    def test_search_path_used_before_scan(self):
        scanner = MagicMock(return_value=[java17_jdk])
        probe = FakeProbe({os.path.join("/usr/bin", "java"): "/usr/lib/jvm/jdk-21/bin/java"})
        result = get_java_home(None, environ={"PATH": "/usr/bin"}, fs_probe=probe, scanner=scanner)
        assert result == "/usr/lib/jvm/jdk-21"
        scanner.assert_not_called()

    def test_scan_used_last(self):
        scanner = MagicMock(return_value=[java8_jdk, java11_jdk])
        assert get_java_home(None, environ={}, fs_probe=FakeProbe({}), scanner=scanner) == java11_jdk.install_path

    @pytest.mark.parametrize("error", [OSError("denied"), RuntimeScanError("broken")])
    def test_scan_failure_counts_as_empty(self, error):
        scanner = MagicMock(side_effect=error)
        with pytest.raises(JavaNotFoundError):
            get_java_home(None, environ={}, fs_probe=FakeProbe({}), scanner=scanner)


class TestRuntimeCandidate:
    """Java release strings map onto the release triple and patch level."""

    @pytest.mark.parametrize("release,version,patch", [
        ("1.8.0_292", (1, 8, 0), 292),
        ("1.8.0_292-b10", (1, 8, 0), 292),
        ("11.0.12", (11, 0, 12), 12),
        ("17", (17, 0, 0), 0),
        ("21.0.1-ea", (21, 0, 1), 1),
        ("11.0.20.1", (11, 0, 20), 1),
        ('"17.0.2"', (17, 0, 2), 2),
    ])
    def test_from_release(self, release, version, patch):
        candidate = RuntimeCandidate.from_release("/jdk", release, is_jdk=True)
        assert candidate.version == version
        assert candidate.security_patch == patch

    def test_from_release_rejects_garbage(self):
        with pytest.raises(ValueError):
            RuntimeCandidate.from_release("/jdk", "unknown", is_jdk=False)
