FIELD_SIZE = 30

WIN_W, WIN_H = 1000, 1000

# speed index -> milliseconds between two steps
SPEEDS = ("slow", "normal", "fast")
FRAME_DELTAS_MS = (180, 120, 90)

LAST_LEVEL = 2

BANNER_DUR = 0.5
