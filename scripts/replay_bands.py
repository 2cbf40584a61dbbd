from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from workai.core.job_store import JsonJobStore  # noqa: E402
from workai.core.pricing_config import read_pricing_config, rules_from_config  # noqa: E402
from workai.pricing.engine import evaluate  # noqa: E402
from workai.schemas.jobs import JobSubmission  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Re-run the band engine over stored jobs and report bands that would change.",
    )
    parser.add_argument("--jobs", default="data/jobs.json", help="Path to the jobs JSON store")
    parser.add_argument("--config", default="config/pricing.yaml", help="Pricing rules YAML")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the changed jobs as JSON instead of a text table.",
    )
    args = parser.parse_args()

    rules = rules_from_config(read_pricing_config(args.config))
    jobs = JsonJobStore(args.jobs).load()

    changes: list[dict] = []
    for index, job in enumerate(jobs):
        # Each job is replayed against the history that existed when it was stored.
        history = jobs[:index]
        submission = JobSubmission(price=job.price, description=job.description, scope_type=job.scope_type)
        outcome = evaluate(submission, history, rules)
        fresh = outcome.result
        if (fresh.ai_low, fresh.ai_high, fresh.upsell_potential) == (job.ai_low, job.ai_high, job.upsell_potential):
            continue
        changes.append(
            {
                "id": job.id,
                "price": job.price,
                "scopeType": job.scope_type,
                "stored": [job.ai_low, job.ai_high, job.upsell_potential],
                "replayed": [fresh.ai_low, fresh.ai_high, fresh.upsell_potential],
                "rules": list(outcome.rules_fired),
                "tuned": outcome.history_tuned,
                "shield": outcome.shield,
            }
        )

    if args.json:
        print(json.dumps(changes, indent=2))
        return

    print(f"Replayed {len(jobs)} jobs, {len(changes)} would change.")
    for change in changes:
        stored = "{}-{} ({}%)".format(*change["stored"])
        replayed = "{}-{} ({}%)".format(*change["replayed"])
        print(f"  {change['id']}  price={change['price']:g}  {stored} -> {replayed}")


if __name__ == "__main__":
    main()
