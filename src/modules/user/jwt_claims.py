from uuid import UUID


def extract_user_data_from_jwt(payload: dict) -> dict:
    """Extract the caller's identity from Supabase JWT claims."""
    raw_user_id = payload.get("sub", "")
    try:
        user_id = UUID(str(raw_user_id)) if raw_user_id else None
    except ValueError:
        user_id = None

    user_metadata = payload.get("user_metadata") or {}

    return {
        "user_id": user_id,
        "email": payload.get("email") or user_metadata.get("email"),
    }
