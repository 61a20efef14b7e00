"""Lookups of the role-specific profile rows attached to a user."""

from supabase import AsyncClient

from database import first_row


async def get_influencer_for_user(
    db: AsyncClient, user_id: str, columns: str = "*"
) -> dict | None:
    response = await db.table("influencers").select(columns).eq("user_id", user_id).limit(1).execute()
    return first_row(response)


async def get_brand_for_user(
    db: AsyncClient, user_id: str, columns: str = "*"
) -> dict | None:
    response = await db.table("brands").select(columns).eq("user_id", user_id).limit(1).execute()
    return first_row(response)


async def resolve_display_names(db: AsyncClient, user_ids: list[str]) -> dict[str, str]:
    """Map user ids to influencer full names or brand company names.

    Brand names win when a user somehow has both profiles.
    """
    names: dict[str, str] = {}
    if not user_ids:
        return names

    influencers = await db.table("influencers").select("user_id, full_name").in_("user_id", user_ids).execute()
    for row in influencers.data or []:
        if row.get("full_name"):
            names[row["user_id"]] = row["full_name"]

    brands = await db.table("brands").select("user_id, company_name").in_("user_id", user_ids).execute()
    for row in brands.data or []:
        if row.get("company_name"):
            names[row["user_id"]] = row["company_name"]

    return names
