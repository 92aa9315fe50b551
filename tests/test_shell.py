"""
Tests for cdmark/shell.py shell integration script.
"""
import pytest

from cdmark.shell import render_init_script


class TestRenderInitScript:
    """Test generated shell functions."""

    @pytest.fixture
    def bash_script(self):
        return render_init_script("bash")

    @pytest.mark.parametrize("function", [
        "addcd()", "lcd()", "lscd()", "gocd()", "rcd()", "rmcd()", "namecd()", "clearcd()",
    ])
    def test_defines_all_functions(self, bash_script, function):
        assert function in bash_script

    def test_gocd_changes_directory_from_go_output(self, bash_script):
        assert 'target="$(command cdmark go "$1")" || return' in bash_script
        assert 'cd -- "$target"' in bash_script

    def test_namecd_maps_actions(self, bash_script):
        assert "-n) command cdmark name" in bash_script
        assert "-un) command cdmark unname" in bash_script

    def test_completion_uses_names_command(self, bash_script):
        assert "command cdmark names" in bash_script
        assert "complete -F _cdmark_bookmark_completion gocd rmcd rcd namecd" in bash_script

    def test_legacy_flag_spellings_translated(self, bash_script):
        assert '-nb) args+=("-bn")' in bash_script
        assert '-abs) args+=("-a")' in bash_script
        assert '-rel) args+=("-r")' in bash_script

    def test_bash_has_no_zsh_preamble(self, bash_script):
        assert "bashcompinit" not in bash_script
        assert bash_script.startswith("# cdmark shell integration (bash)\n")

    def test_zsh_loads_bash_completion(self):
        script = render_init_script("zsh")
        assert "autoload -U +X bashcompinit && bashcompinit" in script
        assert "gocd()" in script

    def test_custom_command(self):
        script = render_init_script("bash", command="/opt/bin/cdmark")
        assert "command /opt/bin/cdmark go" in script
        assert "@COMMAND@" not in script

    def test_unsupported_shell(self):
        with pytest.raises(ValueError, match="Unsupported shell 'fish'"):
            render_init_script("fish")
