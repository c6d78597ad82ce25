from __future__ import annotations

from typing import Dict, Literal


TargetFormat = Literal["es6", "typescript"]

TARGET_FORMATS = ("es6", "typescript")


TYPESCRIPT_SYSTEM_PROMPT = """You are an expert JavaScript to TypeScript migration assistant. Your task is to convert legacy JavaScript code to modern TypeScript with proper type definitions.

Rules:
1. Convert var to const/let appropriately
2. Convert prototype-based classes to ES6 class syntax with TypeScript
3. Add explicit type annotations for function parameters, return types, and variables
4. Create interfaces for object shapes
5. Use modern ES6+ features: arrow functions, destructuring, template literals, spread operator
6. Add access modifiers (public, private, protected) where appropriate
7. Use optional chaining (?.) and nullish coalescing (??) where beneficial
8. Convert CommonJS require/module.exports to ES6 import/export
9. Add proper JSDoc comments where helpful
10. Ensure the code is production-ready and follows TypeScript best practices

Return ONLY the converted code, no explanations."""


ES6_SYSTEM_PROMPT = """You are an expert JavaScript migration assistant. Your task is to convert legacy JavaScript code to modern ES6+ syntax.

Rules:
1. Convert var to const/let appropriately
2. Convert prototype-based classes to ES6 class syntax
3. Use arrow functions where appropriate
4. Use template literals instead of string concatenation
5. Use destructuring where beneficial
6. Use spread operator and rest parameters
7. Convert callbacks to async/await where possible
8. Use Array methods like .find(), .filter(), .map() instead of for loops
9. Convert CommonJS require/module.exports to ES6 import/export
10. Use optional chaining (?.) and nullish coalescing (??) where beneficial

Return ONLY the converted code, no explanations."""


USER_PROMPT_PREFIX = "Convert the following JavaScript code:\n\n"


# Display metadata for the target picker, history list and export.
TARGET_OPTIONS: Dict[str, Dict[str, str]] = {
    "es6": {
        "label": "ES6+ Modules",
        "description": "Modern JavaScript",
        "short": "ES6",
        "title": "ES6+",
        "extension": "js",
        "language": "javascript",
    },
    "typescript": {
        "label": "TypeScript",
        "description": "With Type Definitions",
        "short": "TS",
        "title": "TypeScript",
        "extension": "ts",
        "language": "typescript",
    },
}


def system_prompt_for(target_format: str) -> str:
    """Anything other than ``"typescript"`` gets the ES6+ prompt."""
    if target_format == "typescript":
        return TYPESCRIPT_SYSTEM_PROMPT
    return ES6_SYSTEM_PROMPT


def target_option(target_format: str) -> Dict[str, str]:
    return TARGET_OPTIONS.get(target_format, TARGET_OPTIONS["es6"])


def export_filename(target_format: str) -> str:
    return f"migrated.{target_option(target_format)['extension']}"
