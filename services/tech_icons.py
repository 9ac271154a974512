import asyncio
import random
import re
from typing import List

import requests

from models.interview import TechLogo

TECH_ICON_BASE_URL = "https://cdn.jsdelivr.net/gh/devicons/devicon/icons"
FALLBACK_TECH_ICON = "/tech.svg"

INTERVIEW_COVERS = [
    "/adobe.png",
    "/amazon.png",
    "/facebook.png",
    "/hostinger.png",
    "/pinterest.png",
    "/quora.png",
    "/reddit.png",
    "/skype.png",
    "/spotify.png",
    "/telegram.png",
    "/tiktok.png",
    "/yahoo.png",
]

# Normalized tech name -> devicon directory
TECH_MAPPINGS = {
    "react": "react",
    "reactjs": "react",
    "next": "nextjs",
    "nextjs": "nextjs",
    "vue": "vuejs",
    "vuejs": "vuejs",
    "angular": "angularjs",
    "angularjs": "angularjs",
    "svelte": "svelte",
    "node": "nodejs",
    "nodejs": "nodejs",
    "express": "express",
    "expressjs": "express",
    "javascript": "javascript",
    "js": "javascript",
    "typescript": "typescript",
    "ts": "typescript",
    "html": "html5",
    "html5": "html5",
    "css": "css3",
    "css3": "css3",
    "sass": "sass",
    "scss": "sass",
    "tailwind": "tailwindcss",
    "tailwindcss": "tailwindcss",
    "bootstrap": "bootstrap",
    "redux": "redux",
    "graphql": "graphql",
    "python": "python",
    "django": "django",
    "flask": "flask",
    "fastapi": "fastapi",
    "java": "java",
    "spring": "spring",
    "kotlin": "kotlin",
    "go": "go",
    "golang": "go",
    "rust": "rust",
    "c": "c",
    "c++": "cplusplus",
    "cplusplus": "cplusplus",
    "c#": "csharp",
    "csharp": "csharp",
    "ruby": "ruby",
    "rails": "rails",
    "php": "php",
    "laravel": "laravel",
    "swift": "swift",
    "mongodb": "mongodb",
    "mongo": "mongodb",
    "mysql": "mysql",
    "postgresql": "postgresql",
    "postgres": "postgresql",
    "redis": "redis",
    "firebase": "firebase",
    "docker": "docker",
    "kubernetes": "kubernetes",
    "k8s": "kubernetes",
    "aws": "amazonwebservices",
    "amazonwebservices": "amazonwebservices",
    "azure": "azure",
    "gcp": "googlecloud",
    "googlecloud": "googlecloud",
    "git": "git",
    "github": "github",
    "figma": "figma",
}


def normalize_tech_name(tech: str) -> str:
    key = re.sub(r"\s+", "", re.sub(r"\.js$", "", tech.lower()))
    return TECH_MAPPINGS.get(key, key)


def tech_icon_url(tech: str) -> str:
    normalized = normalize_tech_name(tech)
    return f"{TECH_ICON_BASE_URL}/{normalized}/{normalized}-original.svg"


def icon_exists(url: str, timeout: float = 5) -> bool:
    try:
        response = requests.head(url, timeout=timeout)
        return response.ok
    except requests.RequestException:
        return False


async def get_tech_logos(tech_stack: List[str]) -> List[TechLogo]:
    """Resolve a devicon URL per tech, falling back to the generic icon when the CDN has none."""
    urls = [tech_icon_url(tech) for tech in tech_stack]
    found = await asyncio.gather(*(asyncio.to_thread(icon_exists, url) for url in urls))

    return [
        TechLogo(tech=tech, url=url if exists else FALLBACK_TECH_ICON)
        for tech, url, exists in zip(tech_stack, urls, found)
    ]


def get_random_interview_cover() -> str:
    return f"/covers{random.choice(INTERVIEW_COVERS)}"
