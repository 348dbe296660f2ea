from __future__ import annotations

import argparse
import logging
import random
import time
from typing import Optional

from .aim import clamp_angle
from .config import config_from_env, log_level_from_env, seed_from_env
from .entities import Status
from .session import GameSession, format_time


def _play_shot(session: GameSession, angle: float, power: float, realtime: bool) -> bool:
    """Fires one shot and runs the clock until it resolves. Returns False if the shot was refused."""
    if not session.fire_angle(angle, power):
        return False
    step = session.config.tick_interval
    while session.board.in_flight and session.status is Status.RUNNING:
        session.advance(step)
        if realtime:
            time.sleep(step)
    return True


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description='Headless bubble shooter autoplay')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the board and shot angles')
    parser.add_argument('--shots', type=int, default=20, help='Number of shots to fire')
    parser.add_argument('--power', type=float, default=1.0, help='Shot power in [0, 1]')
    parser.add_argument('--realtime', action='store_true', help='Sleep between ticks at the configured tick rate')
    parser.add_argument('--show-board', action='store_true', help='Print the board after every shot')
    parser.add_argument('--log-level', default=None, help='Logging level (defaults to BUBBLE_LOG_LEVEL)')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=(args.log_level or log_level_from_env()).upper(),
        format='%(asctime)s %(name)s %(levelname)s %(message)s',
    )

    seed = args.seed if args.seed is not None else seed_from_env()
    config = config_from_env()
    session = GameSession(config=config, seed=seed)
    aim_rng = random.Random(seed)

    print('Initial board:')
    print(session.pretty())
    session.start()

    fired = 0
    for _ in range(args.shots):
        if session.status is not Status.RUNNING:
            break
        angle = clamp_angle(aim_rng.uniform(config.aim_min_angle, config.aim_max_angle), config)
        if _play_shot(session, angle, args.power, args.realtime):
            fired += 1
        if args.show_board:
            print()
            print(session.pretty())

    snap = session.snapshot()
    print()
    print(session.pretty())
    outcome = snap.cause.value if snap.cause is not None else 'in progress'
    print(f"Shots fired: {fired}  Score: {snap.score}  Time played: {format_time(snap.time_played)}  Result: {outcome}")
