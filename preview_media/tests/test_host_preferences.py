from preview_media.host_preferences import (
    COLOR_SCHEME_ENV_VAR,
    CONTRAST_ENV_VAR,
    REDUCED_MOTION_ENV_VAR,
    HostPreferences,
    detect_host_preferences,
    env_color_scheme_set,
)


def test_defaults_without_environment() -> None:
    assert detect_host_preferences({}) == HostPreferences("light", False, "no-preference")
    assert env_color_scheme_set({}) is False


def test_environment_values_are_applied() -> None:
    env = {
        COLOR_SCHEME_ENV_VAR: " Dark ",
        REDUCED_MOTION_ENV_VAR: "reduce",
        CONTRAST_ENV_VAR: "more",
    }
    assert detect_host_preferences(env) == HostPreferences("dark", True, "more")
    assert env_color_scheme_set(env) is True


def test_unknown_values_are_ignored() -> None:
    env = {COLOR_SCHEME_ENV_VAR: "sepia", REDUCED_MOTION_ENV_VAR: "sometimes", CONTRAST_ENV_VAR: "max"}
    assert detect_host_preferences(env) == HostPreferences()


def test_reads_process_environment(monkeypatch) -> None:
    monkeypatch.setenv(COLOR_SCHEME_ENV_VAR, "dark")
    monkeypatch.setenv(REDUCED_MOTION_ENV_VAR, "0")
    assert detect_host_preferences().color_scheme == "dark"
    assert detect_host_preferences().reduced_motion is False


def test_with_color_scheme_rejects_unknown() -> None:
    prefs = HostPreferences()
    assert prefs.with_color_scheme("dark").color_scheme == "dark"
    assert prefs.with_color_scheme(None) is prefs
    assert prefs.with_color_scheme("blue") is prefs
