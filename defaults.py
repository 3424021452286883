"""Built-in content shown until an admin saves something else."""

from schemas import ContentDocument

DEFAULT_CONTENT = {
    "projects": [
        {
            "id": 1,
            "title": "E-Commerce Platform",
            "category": "Web Development",
            "image": "https://picsum.photos/seed/shop/800/600",
            "demoUrl": "#",
            "youtubeUrl": "#",
            "description": "A full-stack e-commerce solution with real-time inventory.",
        },
        {
            "id": 2,
            "title": "SaaS Dashboard",
            "category": "UI/UX Design",
            "image": "https://picsum.photos/seed/dash/800/600",
            "demoUrl": "#",
            "youtubeUrl": "#",
            "description": "Modern analytics dashboard with dark mode support.",
        },
        {
            "id": 3,
            "title": "Crypto Wallet App",
            "category": "Mobile App",
            "image": "https://picsum.photos/seed/crypto/800/600",
            "demoUrl": "#",
            "youtubeUrl": "#",
            "description": "Secure cryptocurrency wallet with multi-chain support.",
        },
    ],
    "graphics": [
        {"id": 1, "title": "Modern Logo Set", "category": "Branding", "image": "https://picsum.photos/seed/logo/800/800"},
        {"id": 2, "title": "App Interface", "category": "UI/UX", "image": "https://picsum.photos/seed/ui/800/800"},
        {"id": 3, "title": "Instagram Campaign", "category": "Social Media", "image": "https://picsum.photos/seed/social/800/800"},
        {"id": 4, "title": "Brand Identity", "category": "Branding", "image": "https://picsum.photos/seed/brand/800/800"},
        {"id": 5, "title": "Web Layout", "category": "UI/UX", "image": "https://picsum.photos/seed/web/800/800"},
        {"id": 6, "title": "Marketing Post", "category": "Social Media", "image": "https://picsum.photos/seed/market/800/800"},
    ],
    "reviews": [
        {
            "id": 1,
            "name": "Alex Johnson",
            "role": "CEO, TechFlow",
            "comment": "Delivered an exceptional website that exceeded our expectations. The attention to detail is unmatched.",
            "rating": 5,
            "avatar": "https://i.pravatar.cc/150?u=alex",
        },
        {
            "id": 2,
            "name": "Sarah Miller",
            "role": "Marketing Director",
            "comment": "The graphics gallery created for our brand was stunning. Highly professional and creative.",
            "rating": 5,
            "avatar": "https://i.pravatar.cc/150?u=sarah",
        },
        {
            "id": 3,
            "name": "David Chen",
            "role": "Founder, StartupX",
            "comment": "Fast delivery and great communication. The chatbot integration works perfectly.",
            "rating": 5,
            "avatar": "https://i.pravatar.cc/150?u=david",
        },
    ],
    "serviceDetails": {
        "Web Development": [
            {"kind": "showcase", "name": "Premium E-Commerce", "image": "https://picsum.photos/seed/web1/600/400", "link": "https://bdfollow.shop", "tech": "Next.js, Tailwind"},
            {"kind": "showcase", "name": "SaaS Landing Page", "image": "https://picsum.photos/seed/web2/600/400", "link": "#", "tech": "React, Framer Motion"},
            {"kind": "showcase", "name": "Agency Portfolio", "image": "https://picsum.photos/seed/web3/600/400", "link": "#", "tech": "TypeScript, Vite"},
        ],
        "Video Editing": [
            {"kind": "media", "title": "Brand Storytelling", "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ", "thumbnail": "https://picsum.photos/seed/vid1/600/400"},
            {"kind": "media", "title": "Commercial Promo", "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ", "thumbnail": "https://picsum.photos/seed/vid2/600/400"},
            {"kind": "media", "title": "Event Highlights", "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ", "thumbnail": "https://picsum.photos/seed/vid3/600/400"},
        ],
        "Graphics": [
            {"kind": "media", "title": "Logo Identity", "image": "https://picsum.photos/seed/gfx1/600/400"},
            {"kind": "media", "title": "Marketing Banner", "image": "https://picsum.photos/seed/gfx2/600/400"},
            {"kind": "media", "title": "UI Kit Design", "image": "https://picsum.photos/seed/gfx3/600/400"},
        ],
        "Digital Branding": {
            "before": "https://picsum.photos/seed/oldbrand/800/600?blur=5",
            "after": "https://picsum.photos/seed/newbrand/800/600",
            "performance": [
                {"label": "Page Load Speed", "before": "5.8s", "after": "0.9s", "trend": "up"},
                {"label": "Google SEO Rank", "before": "#45", "after": "#3", "trend": "up"},
                {"label": "User Retention", "before": "12%", "after": "48%", "trend": "up"},
            ],
        },
    },
    "contactInfo": {
        "whatsapp": "01309823877",
        "website": "bdfollow.shop",
        "email": "Hussein.Tausif634@gmail.com",
        "facebook": "https://facebook.com/bdfollow",
        "instagram": "https://instagram.com/bdfollow",
        "twitter": "https://twitter.com/tausif_hossain",
    },
    "aboutData": {
        "title": "Innovative Solutions for Modern Brands",
        "description": (
            "I am a multi-disciplinary designer and developer based in Bangladesh. Through bdfollow.shop, "
            "I help businesses scale their digital presence with cutting-edge technology and premium design aesthetics."
        ),
        "image": "https://picsum.photos/seed/towsif/800/800",
        "experience": "5+",
        "cv": "",
    },
}

CHAT_QA = [
    {"q": "What services do you offer?", "a": "I offer Web Development, UI/UX Design, Graphic Design, and Video Editing services."},
    {"q": "How can I contact you?", "a": "You can reach me via the contact form below or directly on WhatsApp."},
    {"q": "Do you take custom projects?", "a": "Yes! I love working on unique and challenging custom projects."},
    {"q": "Where are you based?", "a": "I am based in Bangladesh, working with clients globally."},
]


def default_document() -> ContentDocument:
    return ContentDocument.model_validate(DEFAULT_CONTENT)
