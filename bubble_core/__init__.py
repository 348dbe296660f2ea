"""
Bubble shooter simulation core.

Pure game logic with no rendering or input handling; any UI layer drives a
GameSession and polls its snapshot.
Modules:
- config.py: GameConfig constants and environment overrides
- entities.py: Bubble, Projectile, PopAnimation, PopEvent, Status, Cause
- geometry.py: GridGeometry (slot <-> pixel mapping, nearest slot)
- clusters.py: same-color flood fill and scoring
- projectile.py: one-tick projectile integration and its outcomes
- deal.py: seeded initial board
- board.py: BoardState
- session.py: GameSession and Snapshot
- aim.py: drag gesture -> (angle, power)
"""
