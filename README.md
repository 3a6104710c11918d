# snakegame

A snake arcade game played on a tile grid, with a level editor and a table
of best scores kept in an SQLite database. It is drawn with pygame.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Sprites and font

The game needs six sprites and one font, laid out like this:

```
<root>/images/<skin>/head.png
<root>/images/<skin>/body.png
<root>/images/<skin>/body_corner.png
<root>/images/<skin>/tail.png
<root>/images/<skin>/food.png
<root>/images/<skin>/wall.png
<root>/fonts/PressStart2P-Regular.ttf
```

The package does not come with these files. By default they are looked for
in a `resources` directory inside the installed package; point the game at
your own copy with `--assets-root`. If any file is missing, the game logs
the error and exits with status 1.

## Playing

```
snake-game --assets-root path/to/assets
```

Options:

- `--skin NAME` – the sprite set under `images/` (default `snake`).
- `--assets-root DIR` – the directory holding `images/` and `fonts/`.

The window is 2400 × 1230 pixels (a 30-pixel top bar over a field of
120-pixel tiles) and runs at 60 ticks per second. Log lines go to standard
output.

### Main menu

The level selector lists the `.json` files found in the `levels` directory
of the current working directory (the directory is created if missing).
Up and Down choose a level, Enter starts it. The buttons are:

- **NEW GAME** – play the selected level. A level larger than 20 × 10
  tiles is refused.
- **CREATE LEVEL** – open the level editor.
- **RANKING** – show the best scores.
- **QUIT** – leave the program.

### In a game

- The arrow keys steer. A turn straight back onto the snake is ignored.
- **R** restarts the level and zeroes the score and time.
- The snake starts two tiles long in the middle of the field and moves once
  every 30 ticks. Each piece of food scores a point; every 5 points it
  moves 5 ticks sooner, down to once every 5 ticks.
- Hitting a wall, the edge of the field or its own body ends the game.

### Game over

The final score and time are shown. Type a player name (at most 13
characters) and click the **S** button beside the field to save the result
once; **NEW GAME** replays the same level and **MAIN MENU** goes back.

### Level editor

- Click a grid cell to place or remove a wall.
- Click the **Name**, **W** or **H** field to type into it; Backspace
  deletes. A red border marks an invalid value: the name may not be empty
  or contain a space or any of `/ \ : * ? " < > |`, and the size must be
  at least 3 × 3 and at most 20 × 10.
- **Save** writes the level to `levels/<name>.json`, or to the first free
  `levels/<name>_<n>.json`, and returns to the menu.
- **Reset** restores an empty 3 × 3 level named `new_level`.

A level file is JSON such as:

```json
{"name":"box","grid_width":5,"grid_height":4,"walls":[{"X":0,"Y":0},{"X":4,"Y":3}]}
```

### Ranking

Shows up to 20 records: player, score, time, level and date. Type into
**Player Name** to keep names starting with that text (case sensitive) and
into **Level Name** to show one level only. The **F** buttons beside the
SCORE and TIME headers flip each sort order (score descending and time
ascending at first). Esc returns to the menu.

## Score storage

Scores are stored only when the `DATABASE_URL` environment variable is
set, either in the environment or in a `.env` file in the working
directory. Its value is the path of an SQLite database file, which is
created with a `records` table if needed. If it cannot be opened, the game
exits with status 1.

Without `DATABASE_URL` the game runs as usual, but the **S** button saves
nothing and the ranking screen shows "Error: Could not load records.".
Only SQLite is supported; there is no client for a database server.

## Using the pieces in code

The game rules live in `snakegame.core` and need no window:

```python
from snakegame.core import Direction, Snake

snake = Snake(5, 5, 2, 1, 1)      # x, y, length, move interval, minimum interval
snake.set_next_direction(Direction.UP)
snake.update()                    # True: the snake moved, growing by one cell
snake.cut_tail()
print(snake.body)                 # [Position(x=5, y=4), Position(x=5, y=5)]
```

`Level.to_dict()` and `Level.from_dict()` convert levels to and from the
file format. `snakegame.config.load_config()` returns the default settings
as a `Config`. `snakegame.storage` provides `Record`, `Filter`,
`build_top_records_query()` and `SqlRepository`, which is also a context
manager:

```python
from datetime import datetime, timedelta, timezone
from snakegame.storage import Filter, Record, SqlRepository

with SqlRepository(":memory:") as repo:
    repo.save_record(Record("ann", 7, timedelta(seconds=42), "box",
                            datetime.now(timezone.utc)))
    top = repo.get_top_records(Filter(level_name="box", players_max_number=20))
```