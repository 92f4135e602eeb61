"""Create database schema and seed sample listings for development."""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete

from app.db.session import SessionLocal, engine
from app.models.base import Base
from app.models.property import Property, PropertyStatus, PropertyType
from app.models.property_image import PropertyImage
from app.models.site_settings import GENERAL_SETTINGS_ID, SiteSettings

NOW = datetime.now(timezone.utc)

PROPERTIES = [
	{
		"id": "prop-garden-house-4a1c",
		"title": "Family house with garden",
		"description": "Bright three-bedroom house on a quiet street, close to schools.",
		"price": 750_000,
		"property_type": PropertyType.HOUSE,
		"status": PropertyStatus.FOR_SALE,
		"total_area": 360.0,
		"built_area": 210.0,
		"bedrooms": 3,
		"bathrooms": 2,
		"parking_spots": 2,
		"featured": True,
		"address_neighborhood": "Evergreen Terrace",
		"address_city": "Springfield",
		"address_state": "IL",
		"created_at": NOW - timedelta(days=1),
		"images": [
			"https://picsum.photos/seed/garden-house-1/800/600",
			"https://picsum.photos/seed/garden-house-2/800/600",
		],
	},
	{
		"id": "prop-downtown-loft-9b22",
		"title": "Downtown loft",
		"description": "Open-plan loft two blocks from the central station.",
		"price": 600_000,
		"property_type": PropertyType.APARTMENT,
		"status": PropertyStatus.BOTH,
		"total_area": 95.0,
		"built_area": 95.0,
		"bedrooms": 1,
		"bathrooms": 1,
		"parking_spots": 1,
		"featured": False,
		"address_neighborhood": "Downtown",
		"address_city": "Springfield",
		"address_state": "IL",
		"created_at": NOW - timedelta(days=3),
		"images": ["https://picsum.photos/seed/downtown-loft/800/600"],
	},
	{
		"id": "prop-lakeside-lot-77de",
		"title": "Lakeside building lot",
		"description": "Flat lot with lake access and utilities at the boundary.",
		"price": 320_000,
		"property_type": PropertyType.LAND,
		"status": PropertyStatus.FOR_SALE,
		"total_area": 1200.0,
		"built_area": None,
		"bedrooms": 0,
		"bathrooms": 0,
		"parking_spots": 0,
		"featured": False,
		"address_neighborhood": "North Shore",
		"address_city": "Shelbyville",
		"address_state": "IL",
		"created_at": NOW - timedelta(days=7),
		"images": [],
	},
	{
		"id": "prop-corner-store-c310",
		"title": "Corner retail space",
		"description": "Ground-floor shop with two street frontages.",
		"price": 2_400_000,
		"property_type": PropertyType.COMMERCIAL,
		"status": PropertyStatus.FOR_RENT,
		"total_area": 180.0,
		"built_area": 180.0,
		"bedrooms": 0,
		"bathrooms": 2,
		"parking_spots": 4,
		"featured": True,
		"address_neighborhood": "Old Town",
		"address_city": "Capital City",
		"address_state": "IL",
		"created_at": NOW - timedelta(days=12),
		"images": ["https://picsum.photos/seed/corner-store/800/600"],
	},
]

SITE_SETTINGS = {
	"whatsapp_number": "5511999990000",
	"email_contact": "contact@example.com",
	"phone_contact": "5511333330000",
	"company_name": "Springfield Realty",
	"company_address": "742 Main Street",
	"company_city": "Springfield",
	"company_postal_code": "62701",
}


async def create_schema() -> None:
	"""Create tables if they do not yet exist."""

	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)


async def seed_properties() -> None:
	"""Insert or update demo listings and replace their images."""

	async with SessionLocal() as session:
		async with session.begin():
			for data in PROPERTIES:
				values = {key: value for key, value in data.items() if key not in {"id", "images"}}
				listing = await session.get(Property, data["id"])
				if listing is None:
					listing = Property(id=data["id"], **values)
					session.add(listing)
				else:
					for key, value in values.items():
						setattr(listing, key, value)

				await session.execute(delete(PropertyImage).where(PropertyImage.property_id == data["id"]))
				for position, url in enumerate(data["images"]):
					session.add(
						PropertyImage(
							id=f"{data['id']}-img-{position}",
							property_id=data["id"],
							url=url,
							position=position,
						)
					)


async def seed_settings() -> None:
	"""Create the general site settings row."""

	async with SessionLocal() as session:
		async with session.begin():
			row = await session.get(SiteSettings, GENERAL_SETTINGS_ID)
			if row is None:
				row = SiteSettings(id=GENERAL_SETTINGS_ID)
				session.add(row)
			for key, value in SITE_SETTINGS.items():
				setattr(row, key, value)


async def main() -> None:
	await create_schema()
	await seed_properties()
	await seed_settings()
	print("Database schema ensured and demo listings seeded.")


if __name__ == "__main__":
	asyncio.run(main())
