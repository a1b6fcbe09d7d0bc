from .agent.workflow import prepare_draft
from .config import get_settings
from .errors import PriorAuthError
from .intake_scenarios import get_intake, INTAKES

from .models import PrepareIntake
import asyncio
import logging
import sys


async def main(intake_id: str) -> int:
    logging.basicConfig(level=get_settings().log_level)

    intake = PrepareIntake.from_payload(get_intake(intake_id))

    print("=" * 50)
    print(f"Preparing prior authorization for {intake_id}")
    print("=" * 50)

    try:
        result = await prepare_draft(intake)
    except PriorAuthError as e:
        print(f"\nRequest rejected: {e}")
        return 1

    print("\n" + result.draft)
    print("\nRequired attachments:")
    for attachment in result.attachments:
        print(f"  - {attachment}")
    print("\nMissing fields:" if result.missing else "\nNo missing fields.")
    for label in result.missing:
        print(f"  - {label}")
    print("\nConfidence:")
    for key, level in result.confidence.items():
        print(f"  {key}: {level.value}")
    return 0


def run() -> None:
    if len(sys.argv) > 1:
        sys.exit(asyncio.run(main(sys.argv[1])))
    else:
        print(f"No intake id provided. Available: {', '.join(INTAKES)}")

if __name__ == "__main__":
    run()
