"""Listing plans shown on the pricing page. Boosted/premium plans map to listing_type on approval."""

PRICING_PLANS = [
    {
        "name": "Free",
        "price": 0,
        "period": "weekly",
        "listing_type": "regular",
        "features": [
            "Featured on homepage for 1 week",
            "Standard queue",
            "Do-follow backlink for top 3 launch",
        ],
        "button_text": "Submit",
    },
    {
        "name": "Basic Boost",
        "price": 5,
        "period": "weekly",
        "listing_type": "boosted",
        "badge": {"text": "Most Popular", "variant": "default"},
        "features": [
            "Launch immediately",
            "Boosted listing for a week",
            "After boosted listing additional regular listing for 1 week",
            "Boost preview",
            "Guaranteed do-follow backlink",
        ],
        "button_text": "Buy Now",
    },
    {
        "name": "Premium Boost",
        "price": 15,
        "period": "weekly",
        "listing_type": "premium",
        "badge": {"text": "Best Value", "variant": "secondary"},
        "features": [
            "Launch immediately",
            "Premium listing for a week",
            "After boosted listing additional regular listing for 1 week",
            "Boost preview",
            "Guaranteed do-follow backlink",
        ],
        "highlighted": True,
        "button_text": "Buy Now",
    },
]
