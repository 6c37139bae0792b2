"""
Example HTTP client for the Rank Relay API.

Demonstrates how to send questions to the /query endpoint.

Author: Blessing Ajala - Software Engineer
GitHub: https://github.com/Oyelamin
LinkedIn: https://www.linkedin.com/in/blessphp/
Twitter: @Blessin06147308
"""

import requests


def ask_relay(base_url: str = "http://localhost:3000"):
    """
    Ask the relay questions in a loop until the user quits.

    Args:
        base_url: Where the relay API is running.
    """
    health = requests.get(f"{base_url}/health", timeout=5)
    print(f"✅ Connected to {base_url} ({health.json().get('status')})\n")

    # Interactive question loop
    while True:
        try:
            # Get user input
            user_query = input("You: ").strip()

            if not user_query:
                continue

            if user_query.lower() in ["exit", "quit", "bye"]:
                print("👋 Goodbye!")
                break

            # The assistant may take up to a minute to answer
            response = requests.post(
                f"{base_url}/query",
                json={"query": user_query},
                timeout=90
            )
            data = response.json()

            if data.get("success"):
                print(f"🤖 Bot: {data.get('answer')}\n")
            else:
                print(f"❌ Error ({response.status_code}): {data.get('message')}\n")

        except KeyboardInterrupt:
            print("\n👋 Goodbye!")
            break
        except requests.RequestException as e:
            print(f"❌ Error: {e}\n")


if __name__ == "__main__":
    import sys

    # Get base URL from command line if provided
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3000"

    print("🚀 Rank Relay - HTTP Client")
    print("=" * 50)
    print("Commands:")
    print("  - Type your question and press Enter")
    print("  - Type 'exit' or 'quit' to stop")
    print("=" * 50)
    print()

    try:
        ask_relay(base_url)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
