"""Print a qualifying classification straight from the OpenF1 API."""

import asyncio
import json
import sys

from f1quali import AsyncOpenF1Client, OpenF1Client, compute_qualifying_result_async
from f1quali.qualifying import OpenF1Source, compute_qualifying_result


def _lap(seconds: float | None) -> str:
    if seconds is None:
        return "-"
    mins, secs = divmod(seconds, 60)
    return f"{int(mins)}:{secs:06.3f}"


def report(year: int, meeting_name_contains: str) -> None:
    """Reconstruct and print qualifying for a meeting found by partial name."""
    with OpenF1Client() as f1:
        meetings = f1.meetings(year=year)
        match = [m for m in meetings if meeting_name_contains.lower() in (m.meeting_name or "").lower()]
        if not match:
            print(f"No meeting found matching '{meeting_name_contains}' in {year}")
            return
        meeting = match[0]

        sessions = [s for s in f1.sessions(meeting_key=meeting.meeting_key) if s.is_qualifying]
        if not sessions:
            print(f"No qualifying session found for {meeting.meeting_name}")
            return

        for session in sessions:
            outcome = compute_qualifying_result(OpenF1Source(f1), session.session_key)
            print(f"\n=== {meeting.meeting_name} - {session.session_name} ===")
            if not outcome.ok:
                print(f"  Unavailable ({outcome.error.value}): {outcome.detail}")
                continue

            for stage in outcome.result.stages:
                print(f"  {stage.name}: {stage.start_time:%H:%M:%S} - {stage.end_time:%H:%M:%S} UTC")

            print()
            for entry in outcome.result.final_grid:
                times = "  ".join(
                    f"{_lap(t):>9}" for t in (entry.q1_time, entry.q2_time, entry.q3_time)
                )
                flag = " (out)" if entry.eliminated else ""
                print(f"  P{entry.position:<2} {entry.name_acronym or entry.driver_number:<4} {times}{flag}")


async def dump_json(session_key: int) -> None:
    """Fetch all inputs concurrently and print the camelCase result."""
    async with AsyncOpenF1Client() as f1:
        outcome = await compute_qualifying_result_async(f1, session_key)
    print(json.dumps(outcome.result.to_dict(), indent=2))


if __name__ == "__main__":
    if len(sys.argv) == 2 and sys.argv[1].isdigit():
        asyncio.run(dump_json(int(sys.argv[1])))
    else:
        report(2024, sys.argv[1] if len(sys.argv) > 1 else "Bahrain")
