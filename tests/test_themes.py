import pytest

from osiris_shell.themes import (
    TERMINAL_THEMES,
    THEME_NAMES,
    Theme,
    get_theme,
    is_theme,
)


def test_theme_names_are_known() -> None:
    assert THEME_NAMES == ["github", "dracula", "monokai", "nord", "gruvbox"]
    for name in THEME_NAMES:
        assert is_theme(name)
    assert not is_theme("solarized")


def test_unknown_theme_falls_back_to_github() -> None:
    assert get_theme("solarized") is TERMINAL_THEMES["github"]


@pytest.mark.parametrize("name", THEME_NAMES)
def test_every_theme_has_hex_colours(name: str) -> None:
    theme = get_theme(name)
    for role in ("background", "foreground", "red", "green", "yellow", "cyan"):
        assert theme.color(role).startswith("#")
        assert len(theme.color(role)) == 7


def test_bright_role_falls_back_to_base_colour() -> None:
    theme = Theme(
        name="Plain",
        background="#000000",
        foreground="#ffffff",
        cursor="#ffffff",
        black="#000000",
        red="#ff0000",
        green="#00ff00",
        yellow="#ffff00",
        blue="#0000ff",
        magenta="#ff00ff",
        cyan="#00ffff",
        white="#ffffff",
    )
    assert theme.color("bright_red") == "#ff0000"
    assert theme.color("bright_black") == "#000000"


def test_unknown_role_raises() -> None:
    with pytest.raises(ValueError, match="Unknown colour role"):
        get_theme("github").color("teal")


def test_dracula_background() -> None:
    assert get_theme("dracula").background == "#111115"
