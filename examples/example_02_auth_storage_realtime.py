"""Example 02: Auth, storage and realtime.

This example demonstrates:
- Signing a user in with mock_user_login() and observing auth events
- Uploading files, the duplicate-upload conflict, and public URLs
- Subscribing to a realtime channel and injecting server events
"""

from mockbase import create_client
from mockbase.testing import mock_user_login


def main():
    """Run the auth/storage/realtime example."""
    print("=" * 80)
    print("MOCKBASE AUTH, STORAGE AND REALTIME EXAMPLE")
    print("=" * 80)

    client = create_client()

    # Step 1: Auth. The listener immediately receives the current state.
    client.auth.on_auth_state_change(lambda event, session: print(f"   auth event: {event}"))
    print("\n1. Signing in:")
    session = mock_user_login(client=client, id="user-1", email="traveler@example.com")
    print(f"   access token: {session.access_token}")
    client.auth.sign_out()

    # Step 2: Storage.
    avatars = client.storage.from_("avatars")
    avatars.upload("user-1/avatar.png", b"\x89PNG...")
    conflict = avatars.upload("user-1/avatar.png", b"again")
    print(f"\n2. Second upload: {conflict.error.message} ({conflict.error.status_code})")
    avatars.upload("user-1/avatar.png", b"replaced", {"upsert": True})
    print(f"   public URL: {avatars.get_public_url('user-1/avatar.png')}")

    # Step 3: Realtime. Events are only delivered once the channel is subscribed.
    changes = {"event": "UPDATE", "schema": "public", "table": "matches"}
    channel = client.channel("match-updates").on(
        "postgres_changes", changes, lambda payload: print(f"   received: {payload}")
    )
    channel.subscribe(lambda status: print(f"\n3. Channel status: {status}"))
    delivered = client.realtime.trigger_event(
        "match-updates", "postgres_changes", changes, {"new": {"id": "match-1", "status": "delivered"}}
    )
    print(f"   delivered to {delivered} callback(s)")
    client.remove_channel(channel)

    print("\n" + "=" * 80)
    print("EXAMPLE COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    main()
