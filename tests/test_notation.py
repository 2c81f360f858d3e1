"""Tests for command notation and game records."""

import pytest

from creativechess.config import GameConfig
from creativechess.game.board import notation_to_square
from creativechess.game.notation import (
    ActionCommand, MoveCommand, command_to_text, game_to_text, parse_command,
    result_string, text_to_game,
)
from creativechess.game.pieces import PieceType
from creativechess.game.registry import ActionId
from creativechess.game.rules import apply_action, apply_move, new_game

CREATIVE_NOW = GameConfig(creative_threshold=0)


def sq(text):
    return notation_to_square(text)


class TestCommands:
    def test_parse_move(self):
        assert parse_command("e2-e4") == MoveCommand(sq("e2"), sq("e4"))

    def test_parse_promotion(self):
        cmd = parse_command("a7-a8=N")
        assert cmd.promotion == PieceType.KNIGHT

    def test_parse_action(self):
        assert parse_command("snip d7") == ActionCommand(ActionId.SNIP, (sq("d7"),))
        assert parse_command("emp_blast") == ActionCommand(ActionId.EMP_BLAST)
        cmd = parse_command("rocket_barrage a7 b7 c7")
        assert cmd.targets == (sq("a7"), sq("b7"), sq("c7"))

    def test_parse_job_application(self):
        cmd = parse_command("job_application b1 nuke")
        assert cmd.targets == (sq("b1"), ActionId.NUKE)

    @pytest.mark.parametrize("text", ["", "e2e4", "teleport e4", "snip z9",
                                      "job_application b1 teleport"])
    def test_parse_errors(self, text):
        with pytest.raises(ValueError):
            parse_command(text)

    @pytest.mark.parametrize("text", ["e2-e4", "e7-e8=Q", "snip d7", "emp_blast",
                                      "job_application b1 nuke", "rocket_barrage a7 b7"])
    def test_text_roundtrip(self, text):
        assert command_to_text(parse_command(text)) == text


class TestGameRecord:
    def _play(self, state, *commands):
        for text in commands:
            cmd = parse_command(text)
            if isinstance(cmd, MoveCommand):
                result = apply_move(state, cmd.from_sq, cmd.to_sq, cmd.promotion)
            else:
                result = apply_action(state, cmd.action_id, *cmd.targets)
            assert result.ok, text
            state = result.state
        return state

    def test_record_format(self):
        state = self._play(new_game(seed=42), "e2-e4", "e7-e5")
        text = game_to_text(state, {"White": "alice"})
        lines = text.split("\n")
        assert lines[0] == '[Seed "42"]'
        assert '[White "alice"]' in lines
        assert '[Result "*"]' in lines
        assert "1. e2-e4" in lines
        assert "2. e7-e5" in lines
        assert lines[-1] == "*"

    def test_replay_reproduces_dice(self):
        state = self._play(new_game(seed=8, config=CREATIVE_NOW),
                           "rocket_barrage a7 b7 c7", "loot_drop", "e2-e4")
        headers, replayed = text_to_game(game_to_text(state), config=CREATIVE_NOW)
        assert headers["Seed"] == "8"
        assert replayed.fen == state.fen
        assert replayed.registry.uses == state.registry.uses
        assert replayed.history == state.history

    def test_replay_unseeded_game(self):
        state = self._play(new_game(config=CREATIVE_NOW),
                           "rocket_barrage a7 b7 c7", "loot_drop")
        assert '[Seed ""]' not in game_to_text(state)
        _, replayed = text_to_game(game_to_text(state), config=CREATIVE_NOW)
        assert replayed.fen == state.fen
        assert replayed.registry.uses == state.registry.uses

    def test_replay_rejects_bad_turn(self):
        text = '[Seed "1"]\n\n1. e2-e4\n2. e2-e4\n*'
        with pytest.raises(ValueError):
            text_to_game(text)

    def test_result_strings(self):
        assert result_string(new_game()) == "*"
        won = apply_action(new_game(config=CREATIVE_NOW, fen="8/8/8/8/8/8/2p5/K7 w - - 0 1"),
                           "sniper_shot", "c2").state
        assert result_string(won) == "1-0"
        assert game_to_text(won).split("\n")[-1] == "1-0"
