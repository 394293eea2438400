"""Generate colored demo log lines, optionally streaming them like a live service.

Usage:
    python scripts/gen_demo_logs.py > demo.log
    python scripts/gen_demo_logs.py --follow | logflow view
"""

# ruff: noqa: S311, PLR2004, T201
from __future__ import annotations

import random
import sys
import time
from datetime import UTC, datetime, timedelta

RESET = "\x1b[0m"
LEVEL_COLORS = {
    "DEBUG": "\x1b[36m",
    "INFO": "\x1b[32m",
    "WARN": "\x1b[33m",
    "ERROR": "\x1b[31m",
    "FATAL": "\x1b[41m\x1b[37m\x1b[1m",
}


def gen_line(ts: datetime, component: str, level: str, message: str) -> str:
    color = LEVEL_COLORS[level]
    stamp = f"\x1b[2m{ts.isoformat(timespec='milliseconds')}{RESET}"
    return f"{stamp} {color}{level:<5}{RESET} \x1b[35m[{component}]{RESET} {message}"


def random_line(ts: datetime, i: int) -> str:
    components = ["api-server", "api-worker", "redis-cache", "scheduler"]
    paths = ["/api/v1/users", "/api/v1/orders", "/api/v1/health", "/api/v1/auth/login", "/api/v1/products"]
    comp = random.choice(components)
    path = random.choice(paths)

    roll = random.random()
    if i > 50 and roll < 0.08:
        host = f"10.0.{random.randint(1, 5)}.{random.randint(1, 254)}:5432"
        return gen_line(ts, comp, "ERROR", f"Connection refused to \x1b[1m{host}\x1b[22m")
    if roll < 0.15:
        return gen_line(ts, comp, "WARN", f"Slow request {path} took \x1b[4m{random.randint(800, 5000)}ms\x1b[24m")
    if roll < 0.16:
        return gen_line(ts, comp, "FATAL", "Out of memory, restarting worker")
    if roll < 0.4:
        return gen_line(ts, comp, "DEBUG", f"Cache hit for key user:{random.randint(1, 100)}")
    status = 200 if random.random() > 0.05 else 500
    status_color = "\x1b[32m" if status == 200 else "\x1b[31m"
    return gen_line(ts, comp, "INFO", f"GET {path} {status_color}{status}{RESET}")


def main() -> None:
    follow = "--follow" in sys.argv[1:]
    count = 500
    base = datetime.now(tz=UTC) - timedelta(hours=1)

    for i in range(count):
        ts = base + timedelta(seconds=i * 2 + random.uniform(0, 1))
        print(random_line(ts, i))

    if not follow:
        return

    i = count
    while True:
        print(random_line(datetime.now(tz=UTC), i), flush=True)
        i += 1
        time.sleep(random.uniform(0.01, 0.3))


if __name__ == "__main__":
    main()
