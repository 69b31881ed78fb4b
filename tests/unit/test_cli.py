"""Tests for the algotrace command-line entry point."""

import pytest

from algotrace.cli import main


class TestCli:
    def test_prints_trace(self, capsys):
        code = main(["level_order", "--tree", "3,9,20,null,null,15,7"])
        out = capsys.readouterr().out

        assert code == 0
        assert "═══ level_order (bfs) ═══" in out
        assert "[complete]" in out
        assert "#1" in out

    def test_variant_flag(self, capsys):
        code = main(["rotate", "--values", "1 2 3 4", "--k", "1", "-V", "reverse"])
        out = capsys.readouterr().out

        assert code == 0
        assert "(reverse)" in out
        assert "[normalize]" in out

    def test_invalid_input_exits_with_two(self, capsys):
        code = main(["kth_smallest", "--tree", "3 1 4", "--k", "0"])
        err = capsys.readouterr().err

        assert code == 2
        assert "Invalid input: k:" in err

    def test_list_algorithms(self, capsys):
        code = main(["--list"])
        out = capsys.readouterr().out

        assert code == 0
        assert "rotate" in out
        assert "extra_array, cyclic, reverse" in out

    def test_stats_flag(self, capsys):
        main(["max_subarray", "--values", "-2 1 -3 4", "--stats"])

        assert "Generation Statistics" in capsys.readouterr().out

    def test_unknown_algorithm_is_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            main(["bubble_sort"])

    def test_play_replays_every_step(self, capsys):
        code = main(["max_depth", "--tree", "1 2", "--play", "--interval-ms", "1"])
        lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("  #")]

        assert code == 0
        assert lines[-1].split()[1] == "[complete]"
        assert [line.split()[0] for line in lines] == [f"#{i}" for i in range(1, len(lines) + 1)]

    def test_unknown_variant_is_a_usage_error(self, capsys):
        with pytest.raises(SystemExit) as info:
            main(["rotate", "--values", "1 2", "--k", "1", "--variant", "bogus"])

        assert info.value.code == 2
        assert "unknown variant 'bogus'" in capsys.readouterr().err

    def test_non_positive_interval_is_a_usage_error(self):
        with pytest.raises(SystemExit) as info:
            main(["max_depth", "--tree", "1", "--play", "--interval-ms", "-5"])

        assert info.value.code == 2
