"""
Rookery Chess Engine

A small UCI chess engine: its own board representation and move generator,
a classical material + piece-square evaluation, and a negamax search with
alpha-beta pruning, quiescence and late move reduction.

## Architecture

The engine is organized into several key modules:

1. **board**: Board representation and rules
   - Packed square indices, pieces, moves and castling rights
   - Pseudo-legal move generation and attack maps
   - Reversible apply/undo with a LIFO history
   - Position text parsing and rendering

2. **evaluation**: Position evaluation functions
   - Abstract Evaluator interface (swappable design)
   - ClassicalEvaluator: Material + Piece-Square Table evaluation

3. **search**: Search algorithms
   - Negamax with alpha-beta pruning
   - Capture-only quiescence search
   - MVV-LVA move ordering and late move reduction

4. **uci**: Universal Chess Interface protocol
   - UCI command handling (fixed-depth, synchronous search)

5. **utils**: Testing and benchmarking utilities
   - Perft move-generation counts
   - Tactical test suite

## Quick Start

### As a Python Library

```python
from rookery.board import starting_position
from rookery.search import find_best_move

position = starting_position()
result = find_best_move(position, depth=3)
print(f"Best move: {result.move} (score: {result.score:.2f})")
```

### As a UCI Engine

```bash
python -m rookery.uci
```

Then connect with a chess GUI (Arena, CuteChess, etc.)
"""

__version__ = "0.1.0"
__license__ = "MIT"

from rookery.board import Position, load_position, starting_position
from rookery.evaluation import ClassicalEvaluator, Evaluator
from rookery.search import SearchConfig, find_best_move
from rookery.uci import UCIEngine

__all__ = [
    'Position',
    'load_position',
    'starting_position',
    'Evaluator',
    'ClassicalEvaluator',
    'SearchConfig',
    'find_best_move',
    'UCIEngine',
]
