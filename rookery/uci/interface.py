"""
UCI Protocol Implementation

This module implements the Universal Chess Interface (UCI) protocol for
communication between the engine and GUI applications.

UCI Commands Supported:
    - uci: Identify engine
    - isready: Synchronization check
    - ucinewgame: Start new game
    - position: Set board position
    - go: Search to a fixed depth
    - stop: Accepted (searches are synchronous, so nothing is running)
    - d: Print the current board
    - quit: Shutdown engine

Search Model:
    Searches run to completion on the command thread at a fixed depth.
    Time controls (wtime, btime, movetime) are parsed, logged and ignored.

References:
    - UCI Protocol: https://www.chessprogramming.org/UCI
"""

import logging
import math
import sys
import time
from pathlib import Path
from typing import List, Optional

from rookery.board import (
    Position,
    load_position,
    move_to_uci,
    parse_move,
    position_to_text,
    render_board,
    starting_position,
)
from rookery.evaluation.base import Evaluator, MATE_SCORE
from rookery.evaluation.classical import ClassicalEvaluator
from rookery.search.config import SearchConfig
from rookery.search.negamax import check_depth, find_best_move

DEFAULT_LOG_FILE = Path.home() / ".rookery" / "engine.log"


def setup_logger(debug=True, log_file: Optional[Path] = None):
    """
    Setup file-based logger for UCI debugging.

    Args:
        debug: If True, log at DEBUG level; otherwise INFO level
        log_file: Log destination (default: ~/.rookery/engine.log)

    Returns:
        Configured logger instance
    """
    log_file = Path(log_file) if log_file is not None else DEFAULT_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("rookery")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    handler = logging.FileHandler(log_file, mode='w')
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def format_score(score: float, depth: int) -> str:
    """
    UCI score text: 'cp N' in centipawns, or 'mate N' in moves.

    Mate scores carry the remaining depth at the mated node, so the mate
    lands ``depth - remaining`` plies from the root. Late move reduction
    lowers the remaining depth on reduced branches, so a mate found there is
    reported further away than it is. The sign and the mate itself are exact.
    """
    if abs(score) >= MATE_SCORE:
        remaining = int(round(abs(score) - MATE_SCORE))
        plies = max(depth - remaining, 1)
        moves = math.ceil(plies / 2)
        return f"mate {moves if score > 0 else -moves}"
    return f"cp {int(round(score * 100))}"


class UCIEngine:
    """
    UCI-compliant engine interface.

    This class handles all UCI communication and drives the search with the
    configured evaluator.

    Attributes:
        position: Current position
        evaluator: Position evaluation function
        config: Search configuration
        default_depth: Depth used when 'go' gives none

    Methods:
        run: Main UCI command loop
        handle_uci: Respond to 'uci' command
        handle_isready: Respond to 'isready' command
        handle_position: Set board position
        handle_go: Search and report the best move
        handle_quit: Shutdown engine
    """

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        config: Optional[SearchConfig] = None,
        default_depth: int = 4,
        debug: bool = True,
        log_file: Optional[Path] = None,
    ):
        """
        Initialize UCI engine.

        Args:
            evaluator: Position evaluator (default: ClassicalEvaluator)
            config: Search configuration (default: SearchConfig())
            default_depth: Search depth when 'go' has no depth (default: 4)
            debug: Enable debug logging (default: True)
            log_file: Log destination (default: ~/.rookery/engine.log)
        """
        if default_depth < 1:
            raise ValueError(f"default_depth must be positive, got {default_depth}")

        self.position: Position = starting_position()
        self.evaluator = evaluator if evaluator else ClassicalEvaluator()
        self.config = config if config else SearchConfig()
        self.default_depth = default_depth

        # Engine info
        self.name = "Rookery"
        self.version = "0.1.0"
        self.author = "Rookery developers"

        self.logger = setup_logger(debug=debug, log_file=log_file)
        self.logger.info("=== Rookery Engine Started ===")

    def send(self, line: str):
        """Write one protocol line to stdout and log it."""
        print(line)
        sys.stdout.flush()
        self.logger.debug(f"<<< {line}")

    def run(self):
        """
        Main UCI command loop.

        Listens for UCI commands on stdin and responds on stdout.
        Runs until 'quit' command is received or stdin closes.
        """
        while True:
            try:
                command = input().strip()

                if not command:
                    continue

                self.logger.debug(f">>> {command}")

                tokens = command.split()
                cmd = tokens[0].lower()

                if cmd == "uci":
                    self.handle_uci()

                elif cmd == "isready":
                    self.handle_isready()

                elif cmd == "ucinewgame":
                    self.handle_ucinewgame()

                elif cmd == "position":
                    self.handle_position(tokens)

                elif cmd == "go":
                    self.handle_go(tokens)

                elif cmd == "stop":
                    self.logger.debug("stop ignored: no search running")

                elif cmd == "d":
                    self.handle_display()

                elif cmd == "quit":
                    self.handle_quit()
                    break

                else:
                    # Unknown commands are ignored per the UCI protocol
                    self.logger.debug(f"Unknown command ignored: {command}")

            except EOFError:
                self.logger.info("EOF received, shutting down")
                break
            except Exception as e:
                self.logger.error(f"Command error: {e}", exc_info=True)
                print(f"# Error: {e}", file=sys.stderr)

    def handle_uci(self):
        """
        Handle 'uci' command - identify engine.

        Response:
            id name Rookery 0.1.0
            id author ...
            uciok
        """
        self.logger.info("Handling: uci")
        self.send(f"id name {self.name} {self.version}")
        self.send(f"id author {self.author}")
        self.send("uciok")

    def handle_isready(self):
        """Handle 'isready' command - synchronization."""
        self.logger.info("Handling: isready")
        self.send("readyok")

    def handle_ucinewgame(self):
        """Handle 'ucinewgame' command - reset for new game."""
        self.logger.info("Handling: ucinewgame - resetting position")
        self.position = starting_position()

    def handle_position(self, tokens: List[str]):
        """
        Handle 'position' command - set board position.

        Formats:
            position startpos
            position startpos moves e2e4 e7e5
            position fen <position text>
            position fen <position text> moves e2e4

        Move application stops at the first malformed or illegal move.

        Args:
            tokens: Command tokens (e.g., ['position', 'startpos', 'moves', 'e2e4'])
        """
        self.logger.info(f"Handling: position {' '.join(tokens[1:])}")

        if len(tokens) < 2:
            self.logger.warning("Position command with insufficient arguments")
            return

        if "moves" in tokens:
            moves_index = tokens.index("moves")
        else:
            moves_index = len(tokens)

        if tokens[1] == "startpos":
            position = starting_position()
        elif tokens[1] == "fen":
            text = " ".join(tokens[2:moves_index])
            try:
                position = load_position(text)
            except ValueError as e:
                self.logger.error(f"Invalid position: {e}")
                print(f"# Invalid position: {e}", file=sys.stderr)
                return
        else:
            self.logger.warning(f"Unknown position type: {tokens[1]}")
            return

        self.position = position

        moves_applied = []
        for move_text in tokens[moves_index + 1:]:
            try:
                move = parse_move(move_text, self.position)
            except ValueError as e:
                self.logger.error(f"Invalid move format: {move_text} - {e}")
                print(f"# Invalid move format: {move_text} - {e}", file=sys.stderr)
                break

            if not self.position.is_valid_move(move):
                self.logger.error(f"Illegal move: {move_text}")
                print(f"# Illegal move: {move_text}", file=sys.stderr)
                break

            self.position.apply(move)
            moves_applied.append(move_text)

        if moves_applied:
            self.logger.debug(f"Applied moves: {' '.join(moves_applied)}")

        self.logger.info(f"Position updated: {position_to_text(self.position)}")

    def handle_go(self, tokens: List[str]):
        """
        Handle 'go' command - search and report.

        Formats:
            go depth 5
            go wtime 300000 btime 300000 (logged, searched at default depth)

        A depth the search rejects is reported and replaced by the default
        depth, so every go is answered with a bestmove.

        Output:
            info depth X score cp Y nodes Z time T pv <move>
            bestmove <move>

        Args:
            tokens: Command tokens (e.g., ['go', 'depth', '5'])
        """
        self.logger.info(f"Handling: go {' '.join(tokens[1:])}")

        depth = None
        ignored = []

        i = 1
        while i < len(tokens):
            if tokens[i] == "depth" and i + 1 < len(tokens):
                depth = int(tokens[i + 1])
                i += 2
            elif tokens[i] in ("movetime", "wtime", "btime", "winc", "binc", "movestogo") \
                    and i + 1 < len(tokens):
                ignored.append(f"{tokens[i]}={tokens[i + 1]}")
                i += 2
            else:
                i += 1

        if ignored:
            self.logger.debug(f"Time controls ignored: {', '.join(ignored)}")

        if depth is None:
            depth = self.default_depth
            self.logger.debug(f"No depth specified, using default depth {depth}")

        try:
            check_depth(depth, self.config)
        except ValueError as e:
            self.logger.error(f"Invalid depth: {e}")
            print(f"# Invalid depth: {e}", file=sys.stderr)
            depth = self.default_depth

        start_time = time.time()
        result = find_best_move(self.position, depth, self.evaluator, self.config)
        elapsed_ms = int((time.time() - start_time) * 1000)

        if result.move is None:
            self.logger.info("No legal moves available")
            self.send("bestmove 0000")
            return

        self.logger.info(
            f"Search complete: best_move={result.move.uci()}, score={result.score:.2f}, "
            f"nodes={result.nodes}, time={elapsed_ms}ms"
        )

        move_text = move_to_uci(result.move)
        self.send(
            f"info depth {depth} score {format_score(result.score, depth)} "
            f"nodes {result.nodes} time {elapsed_ms} pv {move_text}"
        )
        self.send(f"bestmove {move_text}")

    def handle_display(self):
        """Handle 'd' command - print the board and position text."""
        for line in render_board(self.position).splitlines():
            self.send(line)
        self.send(f"Position: {position_to_text(self.position)}")

    def handle_quit(self):
        """Handle 'quit' command - shutdown engine."""
        self.logger.info("=== Rookery Engine Stopped ===")
        sys.exit(0)
