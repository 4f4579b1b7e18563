import argparse
import logging
import sys

from app.client.fight_client import ClientRequestFailure, FightJudgeClient
from app.core.config import WINNER_LABELS, settings
from app.services.fighters import pick_random_fighters


def celebrate(winner: str, opponent1: str, opponent2: str) -> str | None:
    if winner not in WINNER_LABELS:
        return None
    name = opponent1 if winner == "opponent1" else opponent2
    return f"*** {name} wins! ***"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Ask the AI judge who would win in a fight between two opponents."
    )
    parser.add_argument("opponent1", nargs="?", help="first fighter")
    parser.add_argument("opponent2", nargs="?", help="second fighter")
    parser.add_argument("--random", action="store_true", help="pick two random fighters")
    parser.add_argument("--image", action="store_true", help="request an image of the winner")
    parser.add_argument("--url", default=f"http://localhost:{settings.default_port}", help="service base URL")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger("fight_client")

    if args.random:
        opponent1, opponent2 = pick_random_fighters()
    elif args.opponent1 and args.opponent2:
        opponent1, opponent2 = args.opponent1, args.opponent2
    else:
        parser.error("two opponents are required unless --random is given")

    print(f"{opponent1} vs {opponent2}\n")
    client = FightJudgeClient(args.url, logger)
    try:
        judgment = client.judge(
            opponent1,
            opponent2,
            on_text=lambda text: print(text, end="", flush=True),
        )
        print()
        celebration = celebrate(judgment.winner, opponent1, opponent2)
        if celebration is None:
            return 0
        print(celebration)
        if args.image:
            print(client.request_image(opponent1, opponent2, judgment.winner))
    except ClientRequestFailure as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
