def has_role(roles: list[str], *required: str) -> bool:
    return any(role in roles for role in required)
