"""Check which configured completion models answer with the current API key."""
from __future__ import annotations

import argparse
import sys
import time

from studyhub.config import Config
from studyhub.exceptions import GatewayTimeout, ProviderError
from studyhub.services.ai_gateway import AIGateway

TIPS = """
Free tier usage tips:

1. Time your requests - the free tier has daily and per-minute limits
2. Space out requests - wait a few seconds between calls
3. Use simpler models - flash models have better availability than pro
4. Keep it short - use brief prompts and a low maxOutputTokens
5. Monitor usage - check your quotas in the Google Cloud console
"""


def try_model(gateway: AIGateway, model: str, prompt: str) -> bool:
    print(f"\n--- Testing {model} ---")
    try:
        answer = gateway.generate(model, prompt, {"maxOutputTokens": 100, "temperature": 0.3})
    except GatewayTimeout as e:
        print(f"x Timed out: {e}")
        return False
    except ProviderError as e:
        print(f"x Error: {e}")
        return False
    print(f"ok: {answer.strip()}")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--model",
        action="append",
        dest="models",
        help="model to try (repeatable); defaults to the configured primary, fallback and complex models",
    )
    parser.add_argument("--pause", type=float, default=2.0, help="seconds to wait between models")
    parser.add_argument("--no-follow-up", action="store_true", help="skip the follow-up question")
    args = parser.parse_args()

    if not Config.GOOGLE_AI_API_KEY:
        print("ERROR: GOOGLE_AI_API_KEY not found", file=sys.stderr)
        return 1

    gateway = AIGateway.from_config(vars(Config))
    models = args.models or [Config.AI_PRIMARY_MODEL, Config.AI_FALLBACK_MODEL, Config.AI_COMPLEX_MODEL]

    for model in models:
        if try_model(gateway, model, "What is 2+2? Answer in one word."):
            print(f"\nSuccessfully used {model}")
            if not args.no_follow_up:
                try_model(gateway, model, "Explain photosynthesis very briefly in 2 sentences.")
            break
        time.sleep(args.pause)
    else:
        print("\nNo model answered.")

    print(TIPS)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
