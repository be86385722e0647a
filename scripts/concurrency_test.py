"""
Concurrency test for public booking.

- Finds the first free slot of a company via /public/empresas/{slug}/availability
- Fires N concurrent POST /public/empresas/{slug}/appointments for the same slot,
  each with a different phone number
- Prints the status codes (expect 201 for a single winner, 409 for others)
"""

from __future__ import annotations

import argparse
import asyncio
import datetime as dt

import httpx


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser()
    p.add_argument("--base", default="http://localhost:8000")
    p.add_argument("--slug", default="studio-bela-vista")
    p.add_argument("--service-id", type=int, default=1)
    p.add_argument("--n", type=int, default=5, help="number of concurrent requests")
    return p.parse_args()


async def find_free_slot(
    client: httpx.AsyncClient, base: str, slug: str
) -> tuple[str, str] | None:
    """Primeiro (data, HH:MM) livre nos próximos 14 dias."""
    today = dt.date.today()
    for offset in range(0, 14):
        d = (today + dt.timedelta(days=offset)).isoformat()
        r = await client.get(
            f"{base}/public/empresas/{slug}/availability", params={"date": d}
        )
        if r.status_code != 200:
            continue
        slots = r.json().get("slots") or []
        if slots:
            return d, slots[0]
    return None


async def run():
    args = parse_args()

    async with httpx.AsyncClient(timeout=10) as c:
        found = await find_free_slot(c, args.base, args.slug)
        if not found:
            raise RuntimeError("Could not find a free slot in the next 14 days.")
        day, label = found

        async def hit(i: int):
            payload = {
                "service_id": args.service_id,
                "date": day,
                "time": label,
                "phone": f"(11) 9 9000-{i:04d}",
                "name": f"Cliente Concorrente {i}",
            }
            resp = await c.post(
                f"{args.base}/public/empresas/{args.slug}/appointments", json=payload
            )
            return i, resp.status_code, resp.text[:200]

        results = await asyncio.gather(*(hit(i) for i in range(args.n)))
        print(f"slot: {day} {label}")
        for i, code, body in results:
            print(f"req#{i}: {code} {body}")


if __name__ == "__main__":
    asyncio.run(run())
