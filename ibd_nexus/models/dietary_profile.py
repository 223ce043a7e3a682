from pydantic import BaseModel


class DietaryProfile(BaseModel):
    """Static dietary restrictions handed to the menu and ingredient scanners."""

    avoids_insoluble_fiber: bool = False
    avoids_high_fodmap: bool = False
    avoids_dairy: bool = False
    avoids_spicy: bool = False
    avoids_fatty: bool = False

    def restriction_hints(self) -> list[str]:
        """Natural-language hints for the AI prompt, in a fixed order."""
        hints = []
        if self.avoids_insoluble_fiber:
            hints.append("Avoids insoluble fiber (raw vegetables, skins, seeds, nuts, whole grains)")
        if self.avoids_high_fodmap:
            hints.append("Follows a low-FODMAP diet (avoids onion, garlic, wheat, legumes, certain fruits)")
        if self.avoids_dairy:
            hints.append("Avoids dairy (milk, cream, cheese, butter)")
        if self.avoids_spicy:
            hints.append("Avoids spicy food (chili, hot sauce, strong peppers)")
        if self.avoids_fatty:
            hints.append("Avoids fatty or fried food")
        return hints

    def describe(self) -> str:
        hints = self.restriction_hints()
        if not hints:
            return "No specific dietary restrictions."
        return "\n".join(f"- {hint}" for hint in hints)
