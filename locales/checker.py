"""
Проверка и экспорт переводов

Использование:
    # Проверка полноты переводов
    python -m locales.checker check
    python -m locales.checker check --lang es

    # Экспорт для переводчика
    python -m locales.checker export --lang es --format csv

Базовый язык: en. Ключи cards.* необязательны: без перевода
название и значение карты берутся из каталога.
"""

import argparse
import csv
import json
import re
import sys
from typing import Dict, List, Optional

from . import _translations, _load_translations, SUPPORTED_LANGUAGES, DEFAULT_LANGUAGE

OPTIONAL_PREFIXES = ('cards.names.', 'cards.meanings.', 'cards.descriptions.')
PLACEHOLDER = re.compile(r'\{(\w+)\}')


def flatten(data: dict, prefix: str = '') -> Dict[str, str]:
    """Вложенный словарь -> {'a.b.c': 'text'}"""
    result = {}
    for key, value in (data or {}).items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            result.update(flatten(value, f"{full_key}."))
        else:
            result[full_key] = str(value)
    return result


def get_flat_translations() -> Dict[str, Dict[str, str]]:
    if not _translations:
        _load_translations()
    return {lang: flatten(_translations.get(lang, {})) for lang in SUPPORTED_LANGUAGES}


def get_missing_keys(lang: str, flat: Optional[Dict[str, Dict[str, str]]] = None) -> List[str]:
    """Ключи базового языка, которых нет в lang (без необязательных cards.*)"""
    flat = flat or get_flat_translations()
    base = flat.get(DEFAULT_LANGUAGE, {})
    target = flat.get(lang, {})
    return sorted(
        key for key in base
        if key not in target and not key.startswith(OPTIONAL_PREFIXES)
    )


def get_placeholder_errors(lang: str, flat: Optional[Dict[str, Dict[str, str]]] = None) -> List[dict]:
    """Ключи, где набор {плейсхолдеров} отличается от базового языка"""
    flat = flat or get_flat_translations()
    base = flat.get(DEFAULT_LANGUAGE, {})
    errors = []
    for key, text in flat.get(lang, {}).items():
        if key not in base:
            continue
        expected = set(PLACEHOLDER.findall(base[key]))
        found = set(PLACEHOLDER.findall(text))
        if expected != found:
            errors.append({'key': key, 'expected': expected, 'found': found})
    return errors


def check_translations(lang: Optional[str] = None) -> bool:
    """
    Проверить полноту переводов

    Args:
        lang: конкретный язык или None для всех

    Returns:
        True если все переводы полные
    """
    flat = get_flat_translations()
    all_ok = True

    print("\n=== Translation Status ===\n")

    languages = [lang] if lang else [l for l in SUPPORTED_LANGUAGES if l != DEFAULT_LANGUAGE]
    total = len([k for k in flat[DEFAULT_LANGUAGE] if not k.startswith(OPTIONAL_PREFIXES)])

    for check_lang in languages:
        if check_lang not in flat:
            print(f"  {check_lang}: Language not found!")
            all_ok = False
            continue

        missing = get_missing_keys(check_lang, flat)
        translated = total - len(missing)
        pct = (translated / total * 100) if total > 0 else 0
        status = "OK" if not missing else f"MISSING {len(missing)}"
        if missing:
            all_ok = False

        print(f"  {check_lang}: {translated}/{total} ({pct:.0f}%) - {status}")

        if missing and lang:
            print(f"\n  Missing keys for '{check_lang}':")
            for key in missing[:20]:
                en_text = flat[DEFAULT_LANGUAGE][key]
                preview = en_text[:50] + '...' if len(en_text) > 50 else en_text
                print(f"    - {key}: \"{preview}\"")
            if len(missing) > 20:
                print(f"    ... and {len(missing) - 20} more")

    print()
    return all_ok


def check_placeholders() -> bool:
    """Проверить консистентность плейсхолдеров"""
    flat = get_flat_translations()
    all_ok = True

    print("\n=== Placeholder Check ===\n")

    for lang in SUPPORTED_LANGUAGES:
        if lang == DEFAULT_LANGUAGE:
            continue

        errors = get_placeholder_errors(lang, flat)
        if errors:
            all_ok = False
            print(f"  {lang}: {len(errors)} placeholder errors")
            for err in errors[:5]:
                print(f"    - {err['key']}: expected {err['expected']}, found {err['found']}")
            if len(errors) > 5:
                print(f"    ... and {len(errors) - 5} more")
        else:
            print(f"  {lang}: OK")

    print()
    return all_ok


def export_for_translator(lang: str, output_format: str = 'csv', output_file: Optional[str] = None) -> None:
    """
    Экспортировать ключи для переводчика

    Args:
        lang: целевой язык
        output_format: формат вывода ('csv', 'json')
        output_file: путь к выходному файлу
    """
    flat = get_flat_translations()
    base = flat[DEFAULT_LANGUAGE]
    target = flat.get(lang, {})

    rows = [
        {
            'key': key,
            'en': base[key],
            lang: target.get(key, ''),
            'placeholders': ', '.join(PLACEHOLDER.findall(base[key])),
        }
        for key in sorted(base)
    ]

    if not output_file:
        output_file = f"{lang}_translations.{output_format}"

    if output_format == 'csv':
        with open(output_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=['key', 'en', lang, 'placeholders'])
            writer.writeheader()
            writer.writerows(rows)
    else:
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(rows, f, ensure_ascii=False, indent=2)

    translated = sum(1 for r in rows if r[lang])
    print(f"\nExported to {output_file}")
    print(f"Status: {translated}/{len(rows)} translated\n")


def main():
    parser = argparse.ArgumentParser(description='Locale translation tools')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    check_parser = subparsers.add_parser('check', help='Check translation completeness')
    check_parser.add_argument('--lang', help='Specific language to check')

    export_parser = subparsers.add_parser('export', help='Export for translator')
    export_parser.add_argument('--lang', required=True, help='Target language')
    export_parser.add_argument('--format', choices=['csv', 'json'], default='csv')
    export_parser.add_argument('--output', help='Output file path')

    args = parser.parse_args()

    if args.command == 'check':
        ok = check_translations(args.lang)
        placeholders_ok = check_placeholders()
        sys.exit(0 if ok and placeholders_ok else 1)

    elif args.command == 'export':
        export_for_translator(args.lang, args.format, args.output)

    else:
        parser.print_help()


if __name__ == '__main__':
    main()
