def build_validate_prompt(category: str, text: str) -> str:
    examples = {
        "entree": "a sandwich, grilled chicken, veggie pasta",
        "drink": "iced tea, sparkling water, a latte",
    }.get(category, "")

    return (
        "You check free-text lunch orders typed into a catering bot.\n"
        "Return ONLY valid JSON. No markdown. No extra text.\n"
        "Output schema:\n"
        "  {\"valid\": true | false}\n"
        "Rules:\n"
        f"  - valid is true only if the text names something a cafeteria could serve as a {category}.\n"
        f"  - Examples of a valid {category}: {examples}.\n"
        "  - Jokes, instructions, questions and non-food text are not valid.\n"
        "\n"
        f"Text: {text.strip()!r}\n"
    )
