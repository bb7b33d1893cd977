"""
Conversation Simulation Script

Drives complete WhatsApp ordering conversations for many customers at once
against the development simulation endpoint, and fires bursts of messages
for a single customer to check that they are handled one after the other.

Run the API in development mode first, then from project root:
    python scripts/simulate.py --customers 20 --mode both

Author: Café Pickup Bot Team
Version: 3.0.0
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import datetime
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:3000"
TOTAL_CUSTOMERS = 20

ORDER_TEXTS = [
    "2x Cappuccino",
    "1x Latte Macchiato, 1x Croissant",
    "3x Espresso",
    "1x Flat White mit Hafermilch",
    "2x Franzbrötchen, 1x Chai Latte",
]
PICKUP_TIMES = ["7", "08:00", "9.30", "11:15", "13:45", "14:30"]
PAYMENTS = ["PayPal", "vor Ort", "Zahle vor Ort"]


def random_customer_id() -> str:
    return f"whatsapp:+49151{random.randint(1000000, 9999999)}"


async def send_message(
    client: httpx.AsyncClient,
    customer_id: str,
    body: str,
) -> list[str]:
    """Send one message and return the reply segments."""
    response = await client.post(
        f"{API_BASE_URL}/webhook/simulation",
        json={"from": customer_id, "body": body},
        timeout=30.0,
    )
    response.raise_for_status()
    return response.json()["replies"]


# =============================================================================
# FULL CONVERSATIONS
# =============================================================================

async def run_conversation(
    client: httpx.AsyncClient,
    conversation_num: int,
) -> dict[str, Any]:
    """Walk one customer from greeting to confirmation."""
    customer_id = random_customer_id()
    script = [
        "Hallo",
        random.choice(PICKUP_TIMES),
        random.choice(ORDER_TEXTS),
        random.choice(PAYMENTS),
        "ja",
    ]
    start_time = time.time()

    try:
        replies: list[str] = []
        for body in script:
            replies = await send_message(client, customer_id, body)
        elapsed = round(time.time() - start_time, 3)

        final = "\n".join(replies)
        return {
            "num": conversation_num,
            "success": "Bestellung ist eingegangen" in final,
            "time": elapsed,
            "error": None if "Bestellung ist eingegangen" in final else final[:100],
            "mode": "conversation",
        }
    except Exception as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "num": conversation_num,
            "success": False,
            "time": elapsed,
            "error": str(e)[:100],
            "mode": "conversation",
        }


# =============================================================================
# SAME-CUSTOMER BURSTS
# =============================================================================

async def run_burst(
    client: httpx.AsyncClient,
    burst_num: int,
) -> dict[str, Any]:
    """
    Fire the pickup answer several times concurrently for one customer.

    Exactly one of them may advance the conversation to the order step;
    the others must see the already advanced state.
    """
    customer_id = random_customer_id()
    start_time = time.time()

    try:
        await send_message(client, customer_id, "Hallo")
        results = await asyncio.gather(
            *(send_message(client, customer_id, "10:00") for _ in range(5))
        )
        elapsed = round(time.time() - start_time, 3)

        advanced = sum(1 for replies in results if "Was möchtest du bestellen" in "\n".join(replies))
        await send_message(client, customer_id, "abbrechen")
        return {
            "num": burst_num,
            "success": advanced == 1,
            "time": elapsed,
            "error": None if advanced == 1 else f"{advanced} messages advanced the state",
            "mode": "burst",
        }
    except Exception as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "num": burst_num,
            "success": False,
            "time": elapsed,
            "error": str(e)[:100],
            "mode": "burst",
        }


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(
    mode: str = "both",
    num_customers: int = TOTAL_CUSTOMERS,
) -> dict[str, Any]:
    """
    Run the simulation.

    Args:
        mode: "conversation", "burst", or "both"
        num_customers: Number of simulated customers
    """
    print("=" * 70)
    print("☕ CONVERSATION SIMULATION")
    print("=" * 70)
    print(f"📋 Customers: {num_customers}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"🔧 Mode: {mode}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        if mode == "conversation":
            tasks = [run_conversation(client, i + 1) for i in range(num_customers)]
        elif mode == "burst":
            tasks = [run_burst(client, i + 1) for i in range(num_customers)]
        else:  # both
            tasks = [
                run_conversation(client, i + 1) if i % 2 == 0 else run_burst(client, i + 1)
                for i in range(num_customers)
            ]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Successful: {len(successful)}/{num_customers}")
    print(f"❌ Failed: {len(failed)}/{num_customers}")
    print(f"⏱️  Total Time: {total_time}s")

    for kind in ("conversation", "burst"):
        of_kind = [r for r in results if r["mode"] == kind]
        if of_kind:
            ok = len([r for r in of_kind if r["success"]])
            print(f"   {kind}: {ok}/{len(of_kind)} successful")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"\n📈 Average duration: {avg_time}s")

    if failed:
        # The mock notifier fails ~5% of deliveries on purpose
        print("\n⚠️  Failure details (first 5):")
        for f in failed[:5]:
            print(f"   #{f['num']} [{f['mode']}]: {f['error']}")

    print("=" * 70)

    return {
        "total": num_customers,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


def main() -> None:
    global API_BASE_URL
    parser = argparse.ArgumentParser(description="Simulate WhatsApp ordering conversations")
    parser.add_argument("--customers", type=int, default=TOTAL_CUSTOMERS, help="Number of customers")
    parser.add_argument(
        "--mode",
        choices=["conversation", "burst", "both"],
        default="both",
        help="Full conversations, same-customer bursts, or both",
    )
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")

    summary = asyncio.run(run_simulation(args.mode, args.customers))
    sys.exit(0 if summary["failed"] == 0 else 1)


if __name__ == "__main__":
    main()
