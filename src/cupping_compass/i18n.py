"""Label tables for reports and charts."""

from collections.abc import Callable

from cupping_compass.exceptions import ValidationError

Translator = Callable[[str], str]

LABELS: dict[str, dict[str, str]] = {
    "en": {
        "aroma": "Aroma",
        "flavor": "Flavor",
        "aftertaste": "Aftertaste",
        "acidity": "Acidity",
        "body": "Body",
        "balance": "Balance",
        "sweetness": "Sweetness",
        "uniformity": "Uniformity",
        "clean_cup": "Clean Cup",
        "defects": "Defects",
        "cupper_score": "Cupper Score",
        "fragrance_aroma": "Fragrance/Aroma",
        "overall_score": "Overall Score",
        "roast_level": "Roast Level",
        "evaluation_date": "Evaluation Date",
        "water_temperature": "Water Temperature",
        "attribute": "Attribute",
        "score": "Score",
        "scores": "Scores",
        "cup": "Cup",
        "additional_evaluations": "Additional Evaluations",
        "flavor_profile": "Flavor Profile",
        "notes": "Notes",
        "generated_on": "Generated on",
        "hot": "Hot",
        "warm": "Warm",
        "cold": "Cold",
        "combined": "Combined",
        "low": "Low",
        "medium": "Medium",
        "high": "High",
        "roast_light": "Light",
        "roast_medium": "Medium",
        "roast_medium_dark": "Medium-Dark",
        "roast_dark": "Dark",
        "floral": "Floral",
        "fruity": "Fruity",
        "spicy": "Spicy",
        "nutty_cocoa": "Nutty/Cocoa",
        "caramelized": "Caramelized",
        "herbal": "Herbal",
        "earthy": "Earthy",
        "other": "Other",
    },
    "es": {
        "aroma": "Aroma",
        "flavor": "Sabor",
        "aftertaste": "Postgusto",
        "acidity": "Acidez",
        "body": "Cuerpo",
        "balance": "Balance",
        "sweetness": "Dulzura",
        "uniformity": "Uniformidad",
        "clean_cup": "Taza Limpia",
        "defects": "Defectos",
        "cupper_score": "Puntaje del Catador",
        "fragrance_aroma": "Fragancia/Aroma",
        "overall_score": "Puntuación General",
        "roast_level": "Nivel de Tueste",
        "evaluation_date": "Fecha de Evaluación",
        "water_temperature": "Temperatura del Agua",
        "attribute": "Atributo",
        "score": "Puntaje",
        "scores": "Puntajes",
        "cup": "Taza",
        "additional_evaluations": "Evaluaciones Adicionales",
        "flavor_profile": "Perfil de Sabor",
        "notes": "Observaciones",
        "generated_on": "Generado el",
        "hot": "Caliente",
        "warm": "Tibio",
        "cold": "Frío",
        "combined": "Combinado",
        "low": "Baja",
        "medium": "Media",
        "high": "Alta",
        "roast_light": "Claro",
        "roast_medium": "Medio",
        "roast_medium_dark": "Medio-Oscuro",
        "roast_dark": "Oscuro",
        "floral": "Floral",
        "fruity": "Frutal",
        "spicy": "Especiado",
        "nutty_cocoa": "Nueces/Cacao",
        "caramelized": "Caramelizado",
        "herbal": "Herbal",
        "earthy": "Tierra",
        "other": "Otros",
    },
}

DEFAULT_LANGUAGE = "es"


def identity(key: str) -> str:
    return key


def get_translator(language: str = DEFAULT_LANGUAGE) -> Translator:
    """Return a label lookup for the language; unknown keys map to themselves."""
    table = LABELS.get(language)
    if table is None:
        raise ValidationError("language", f"unsupported language: {language!r}")
    return lambda key: table.get(key, key)


def roast_level_key(roast_level: str) -> str:
    return "roast_" + roast_level.replace("-", "_")
