#!/usr/bin/env python3
"""
Walk the RCM decision diagram for a sample asset and print the exported record.

Usage (from project root):
  python scripts/demo.py                      # scripted answers
  python scripts/demo.py --interactive        # answer each question at the prompt

Output: the questions asked, the recommendation and the JSON decision record.
"""
import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Hidden failure, safety consequence, no proactive task, failure-finding task feasible
SCRIPTED_ANSWERS = ["no", "yes", "no", "no", "no", "yes"]


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--interactive", action="store_true", help="Prompt for each answer")
    parser.add_argument("--asset", default="Pressure Safety Valve")
    parser.add_argument("--failure-mode", default="Fails to open on demand")
    args = parser.parse_args()

    from ffi_backend.services.rcm_service import RCMWalker

    walker = RCMWalker()
    state = walker.begin(walker.initial_state(), args.asset, args.failure_mode)
    print(f"Asset: {state.asset} / Failure mode: {state.failure_mode}\n")

    answers = iter(SCRIPTED_ANSWERS)
    while not walker.is_complete(state):
        node = walker.question(state.current_step)
        print(f"[{state.progress:5.1f}%] {node.header}: {node.main_text}")
        if args.interactive:
            answer = input("  yes/no > ").strip().lower()
            if answer not in ("yes", "no"):
                print("  Please answer yes or no.")
                continue
        else:
            answer = next(answers)
            print(f"  > {answer}")
        state = walker.answer(state, answer)

    action = walker.answer_node(state.current_step)
    print(f"\nRecommendation: {action.recommendation}")
    print(f"  {action.explanation}\n")
    print(walker.export_json(state))


if __name__ == "__main__":
    main()
