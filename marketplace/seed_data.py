"""
Default taxonomy and advertisement banners loaded by the category initializer.
"""

SEED_CATEGORIES = [
    {
        "name": "Buy",
        "slug": "buy",
        "description": "Buy residential and commercial properties",
        "subcategories": [
            {
                "name": "Residential",
                "slug": "residential",
                "description": "Residential properties for purchase",
                "mini_subcategories": [
                    ("1 BHK", "1-bhk", "1 Bedroom, Hall, Kitchen apartments"),
                    ("2 BHK", "2-bhk", "2 Bedroom, Hall, Kitchen apartments"),
                    ("3 BHK", "3-bhk", "3 Bedroom, Hall, Kitchen apartments"),
                    ("4+ BHK", "4-plus-bhk", "4 or more bedroom apartments and homes"),
                ],
            },
            {
                "name": "Plot",
                "slug": "plot",
                "description": "Residential and commercial plots",
                "mini_subcategories": [
                    ("Residential Plot", "residential-plot", "Plots for building a home"),
                    ("Commercial Plot", "commercial-plot", "Plots for shops and offices"),
                ],
            },
            {
                "name": "Flat",
                "slug": "flat",
                "description": "Apartments and builder floors",
                "mini_subcategories": [
                    ("Apartment", "apartment", "Apartments in societies"),
                    ("Builder Floor", "builder-floor", "Independent builder floors"),
                ],
            },
        ],
    },
    {
        "name": "Rent",
        "slug": "rent",
        "description": "Rent residential and commercial properties",
        "subcategories": [
            {
                "name": "Residential",
                "slug": "residential",
                "description": "Residential properties for rent",
                "mini_subcategories": [
                    ("1 BHK", "1-bhk", "1 Bedroom apartments on rent"),
                    ("2 BHK", "2-bhk", "2 Bedroom apartments on rent"),
                    ("3+ BHK", "3-plus-bhk", "3 or more bedroom homes on rent"),
                ],
            },
        ],
    },
    {
        "name": "Commercial",
        "slug": "commercial",
        "description": "Commercial spaces and offices",
        "subcategories": [
            {
                "name": "Commercial Spaces",
                "slug": "commercial-spaces",
                "description": "Various commercial property types",
                "mini_subcategories": [
                    ("Shop", "shop", "Retail shops and storefronts"),
                    ("Office Space", "office-space", "Office spaces and suites"),
                    ("Showroom", "showroom", "Showrooms and display spaces"),
                    ("Warehouse", "warehouse", "Warehouses and storage facilities"),
                    ("Factory", "factory", "Industrial factories and units"),
                    ("Restaurant Space", "restaurant-space", "Food and beverage spaces"),
                ],
            },
        ],
    },
    {
        "name": "Agricultural",
        "slug": "agricultural",
        "description": "Agricultural lands and farming properties",
        "subcategories": [
            {
                "name": "Agricultural Land",
                "slug": "agricultural-land",
                "description": "Agricultural properties and farming lands",
                "mini_subcategories": [
                    ("Agricultural Land", "agricultural-land", "Vacant agricultural land for cultivation"),
                    ("Farmhouse with Land", "farmhouse-with-land", "Farmhouses with surrounding agricultural land"),
                    ("Orchard/Plantation", "orchard-plantation", "Fruit orchards and tree plantations"),
                    ("Dairy Farm", "dairy-farm", "Dairy farming properties with facilities"),
                    ("Poultry Farm", "poultry-farm", "Poultry farming properties and units"),
                    ("Fish/Prawn Farm", "fish-prawn-farm", "Aquaculture and fish farming properties"),
                    ("Polyhouse/Greenhouse", "polyhouse-greenhouse", "Protected cultivation structures"),
                    ("Pasture/Grazing Land", "pasture-grazing-land", "Land for cattle grazing and pasturing"),
                ],
            },
        ],
    },
    {
        "name": "PG / Co-living",
        "slug": "pg",
        "description": "Paying guest rooms and co-living spaces",
        "subcategories": [
            {
                "name": "PG",
                "slug": "pg",
                "description": "Paying guest accommodation",
                "mini_subcategories": [
                    ("Boys PG", "boys-pg", "PG accommodation for men"),
                    ("Girls PG", "girls-pg", "PG accommodation for women"),
                    ("Co-living", "co-living", "Shared co-living spaces"),
                ],
            },
        ],
    },
]

ADVERTISEMENT_BANNER_POSITION = "advertisement_banners"

SEED_ADVERTISEMENT_BANNERS = [
    {
        "title": "Advertise Your New Residential Project",
        "description": "Reach thousands of homebuyers looking for their dream home",
        "image_url": "https://images.unsplash.com/photo-1502672260266-1c1ef2d93688?q=80&w=1600&auto=format&fit=crop",
        "sort_order": 1,
    },
    {
        "title": "Advertise Your New Commercial Project",
        "description": "Connect with business owners and investors",
        "image_url": "https://images.unsplash.com/photo-1505693416388-ac5ce068fe85?q=80&w=1600&auto=format&fit=crop",
        "sort_order": 2,
    },
    {
        "title": "Advertise Your Real Estate Investment Project",
        "description": "Attract serious investors to your projects",
        "image_url": "https://images.unsplash.com/photo-1560185127-6ed189bf02f4?q=80&w=1600&auto=format&fit=crop",
        "sort_order": 3,
    },
    {
        "title": "Advertise Your Industrial Property",
        "description": "Find the right businesses and manufacturers",
        "image_url": "https://images.unsplash.com/photo-1486406146926-c627a92ad1ab?q=80&w=1600&auto=format&fit=crop",
        "sort_order": 4,
    },
]
