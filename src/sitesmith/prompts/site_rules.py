"""
Shared rules injected into Sitesmith's prompt templates.

Every uppercase string constant in this module is exposed to the Jinja2
templates as a global of the same name.
"""

# --- Output format ---

DOCUMENT_START_MARKER = "<!DOCTYPE html>"
DOCUMENT_END_MARKER = "</html>"

# --- Styling & assets ---

TAILWIND_CDN_SCRIPT = '<script src="https://cdn.tailwindcss.com"></script>'

PLACEHOLDER_IMAGE_PATTERN = "https://picsum.photos/width/height"
PLACEHOLDER_IMAGE_EXAMPLE = '<img src="https://picsum.photos/800/600" alt="placeholder">'

# --- Prompt enhancement ---

ENHANCEMENT_EXAMPLE_REQUEST = "a portfolio for a photographer"
ENHANCEMENT_EXAMPLE_RESULT = (
    "Create a modern and elegant portfolio website for a photographer named 'Alex Doe'. "
    "The site should have a dark theme with a charcoal background (#1A1A1A) and white/light-gray text. "
    "It needs a sticky navigation bar with links to 'Home', 'Gallery', 'About', and 'Contact'. "
    "The 'Home' page should feature a full-screen hero image with the photographer's name in a bold, stylish font. "
    "The 'Gallery' section must be a responsive grid of images that opens a lightbox when an image is clicked. "
    "The 'About' page should have a photo of the photographer and a short biography. "
    "The 'Contact' page needs a simple form with fields for Name, Email, and Message, plus social media links."
)
