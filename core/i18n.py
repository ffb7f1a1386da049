"""
UI strings for the dashboard in Russian and Swedish.

``translate`` looks a key up in the chosen language, falls back to Russian,
and finally to the key itself. ``{name}`` placeholders are filled from
keyword arguments.
"""
import logging
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "ru"

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "ru": {
        "title": "Merinfo Explorer",
        "dataset": "Данные",
        "default_datasets": "Готовые наборы данных",
        "choose": "Выберите…",
        "load_dataset": "Загрузить",
        "upload": "Или загрузите файл",
        "reading": "Чтение…",
        "waiting": "Ожидание данных…",
        "status_loaded": "Данные загружены.",
        "status_error_format": "Не удалось разобрать файл. Ожидается JSON или JSON Lines.",
        "status_error_read": "Не удалось прочитать файл.",
        "preferences": "Настройки",
        "view": "Вид",
        "language": "Язык",
        "theme": "Тема",
        "view_grid": "Карточки",
        "view_list": "Список",
        "theme_light": "Светлая",
        "theme_dark": "Тёмная",
        "theme_system": "Системная",
        "search": "Поиск",
        "search_placeholder": "Название, орг. номер или город",
        "sort": "Сортировка",
        "advanced_filters": "Расширенные фильтры",
        "min": "Мин",
        "max": "Макс",
        "revenue": "Выручка",
        "profit_after_financial_items": "Прибыль до налогов",
        "net_profit": "Чистая прибыль",
        "total_assets": "Активы",
        "company_phone": "Телефон компании",
        "board_phone": "Телефон правления",
        "f_skatt": "F-skatt",
        "vat_registered": "Плательщик НДС",
        "employer_registered": "Работодатель",
        "tri_any": "Все",
        "tri_yes": "Да",
        "tri_no": "Нет",
        "sni": "SNI",
        "categories": "Категории",
        "status": "Статус",
        "favorites_only": "Только избранное",
        "clear_filters": "Сбросить фильтры",
        "no_data": "Нет данных. Выберите набор данных или загрузите файл JSON / JSON Lines.",
        "records": "Записей: {count}",
        "truncated": "Показаны первые {limit} записей. Уточните поиск.",
        "no_matches": "Нет записей, подходящих под фильтры.",
        "comment": "Комментарий",
        "company": "Компания",
        "city": "Город",
        "financials": "Финансы ({period})",
        "no_board": "Нет данных о правлении",
        "status_none": "-",
        "status_interested": "Интересно",
        "status_not_interested": "Не интересно",
        "status_callback": "Перезвонить",
    },
    "sv": {
        "dataset": "Data",
        "default_datasets": "Färdiga dataset",
        "choose": "Välj…",
        "load_dataset": "Ladda",
        "upload": "Eller ladda upp en fil",
        "reading": "Läser…",
        "waiting": "Väntar på data…",
        "status_loaded": "Data laddad.",
        "status_error_format": "Kunde inte tolka filen. JSON eller JSON Lines förväntas.",
        "status_error_read": "Kunde inte läsa filen.",
        "preferences": "Inställningar",
        "view": "Vy",
        "language": "Språk",
        "theme": "Tema",
        "view_grid": "Kort",
        "view_list": "Lista",
        "theme_light": "Ljust",
        "theme_dark": "Mörkt",
        "theme_system": "System",
        "search": "Sök",
        "search_placeholder": "Namn, organisationsnummer eller ort",
        "sort": "Sortering",
        "advanced_filters": "Avancerade filter",
        "min": "Min",
        "max": "Max",
        "revenue": "Omsättning",
        "profit_after_financial_items": "Resultat efter finansnetto",
        "net_profit": "Årets resultat",
        "total_assets": "Summa tillgångar",
        "company_phone": "Företagstelefon",
        "board_phone": "Telefon till styrelsen",
        "f_skatt": "F-skatt",
        "vat_registered": "Momsregistrerad",
        "employer_registered": "Arbetsgivare",
        "tri_any": "Alla",
        "tri_yes": "Ja",
        "tri_no": "Nej",
        "sni": "SNI",
        "categories": "Kategorier",
        "status": "Status",
        "favorites_only": "Endast favoriter",
        "clear_filters": "Rensa filter",
        "no_data": "Ingen data. Välj ett dataset eller ladda upp en JSON / JSON Lines-fil.",
        "records": "Poster: {count}",
        "truncated": "Visar de första {limit} posterna. Förfina sökningen.",
        "no_matches": "Inga poster matchar filtren.",
        "comment": "Kommentar",
        "company": "Företag",
        "city": "Ort",
        "financials": "Ekonomi ({period})",
        "no_board": "Ingen styrelsedata",
        "status_none": "-",
        "status_interested": "Intresserad",
        "status_not_interested": "Inte intresserad",
        "status_callback": "Ring tillbaka",
    },
}


def translate(language: str, key: str, **replacements) -> str:
    """Text for ``key`` in ``language``."""
    table = TRANSLATIONS.get(language, TRANSLATIONS[DEFAULT_LANGUAGE])
    text = table.get(key) or TRANSLATIONS[DEFAULT_LANGUAGE].get(key)
    if text is None:
        logger.debug(f"No translation for {key!r}")
        text = key
    for name, value in replacements.items():
        text = text.replace(f"{{{name}}}", str(value))
    return text
