"""Example 01: Basic Usage - querying the mock backend.

This example demonstrates the fundamental operations:
- Creating an isolated client with create_client()
- Seeding the SpareCarry demo dataset
- Inserting, updating and deleting rows through the query builder
- Filtering, ordering and paginating selects
"""

from mockbase import create_client
from mockbase.testing import seed_test_data


def main():
    """Run the basic usage example."""
    print("=" * 80)
    print("MOCKBASE BASIC USAGE EXAMPLE")
    print("=" * 80)

    # Step 1: Create a client and load the demo dataset.
    client = create_client()
    seed_test_data(client=client)
    print("\n1. Tables:", ", ".join(client.store.tables()))

    # Step 2: Insert a trip. id, created_at and updated_at are generated.
    response = (
        client.from_("trips")
        .insert(
            {
                "user_id": "user-1",
                "type": "boat",
                "from_location": "Miami",
                "to_location": "Nassau",
                "spare_kg": 150,
                "status": "active",
            }
        )
        .select("id, created_at")
        .single()
        .execute()
    )
    print(f"\n2. Inserted trip {response.data['id']} at {response.data['created_at']}")

    # Step 3: Filter and order.
    trips = (
        client.from_("trips")
        .select("id, type, spare_kg")
        .eq("status", "active")
        .order("spare_kg", desc=True)
        .execute()
    )
    print("\n3. Active trips by spare capacity:")
    for trip in trips.data:
        print(f"   - {trip['id']}: {trip['type']} ({trip['spare_kg']} kg)")

    # Step 4: Update the match and read it back.
    client.from_("matches").update({"status": "chatting"}).eq("id", "match-1").execute()
    match = client.from_("matches").select().eq("id", "match-1").maybe_single().execute()
    print(f"\n4. match-1 is now {match.data['status']}")

    # Step 5: Delete returns the removed rows.
    removed = client.from_("trips").delete().eq("type", "boat").execute()
    print(f"\n5. Removed {len(removed.data)} boat trip(s)")

    print("\n" + "=" * 80)
    print("EXAMPLE COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    main()
