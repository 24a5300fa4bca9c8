# Year board: JSON task files laid out as a 12-month x 4-week kanban calendar
#
# Components:
#   config.py   - Runtime configuration (YAML + env overrides)
#   schema.py   - Data model (BoardItem, bucket keys, filename convention)
#   scanner.py  - Data directory scan and month/week bucketing
#   store.py    - File mutations (reschedule, add item)
#   render.py   - View model for the HTML board
#   server.py   - Flask app and CLI entry point
