from ._common import iso


def serialize_membership(membership) -> dict | None:
    if not membership:
        return None
    return {
        "tierName": membership.tier_name,
        "isActive": membership.is_active,
        "expiresAt": iso(membership.expires_at),
    }


def serialize_user(user, membership=None) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "company": user.company,
        "isAdmin": user.is_admin,
        "savedAddress": user.saved_address,
        "membership": serialize_membership(membership),
        "createdAt": iso(user.created_at),
    }


def serialize_admin_user(user, membership=None) -> dict:
    data = serialize_user(user, membership)
    data["membershipTier"] = membership.tier_name if membership else "FREE"
    data["updatedAt"] = iso(user.updated_at)
    return data
