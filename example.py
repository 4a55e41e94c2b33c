#!/usr/bin/env python3
"""
Example usage of JSON Butler.

This script generates dataclasses from a JSON sample, loads them, and
serializes the generated root type back into a representative document.
"""

import json
import sys
import types

from json_butler import CodeStyle, JSONButler, TypeHandle


def main():
    """Main example function."""
    print("JSON Butler Example")
    print("=" * 50)

    sample_data = {
        "id": 42,
        "title": "Learning Python",
        "author": {"name": "Bob Smith", "email": "bob@example.com"},
        "comments": [
            {"author": {"name": "Alice Johnson", "email": "alice@example.com"}, "score": 4},
            {"author": {"name": "Carol White", "email": None}, "score": 4.5, "edited": True},
        ],
        "tags": ["python", "programming"],
    }
    json_string = json.dumps(sample_data, indent=2)
    print(f"Sample of original JSON:\n{json_string[:200]}...\n")

    butler = JSONButler(default_namespace="Blog")

    result = butler.generate_code(json_string, type_name="Post")
    print(f"Generated {result.type_count} type(s):\n")
    print(result.source)
    for conflict in result.diagnostics:
        print(f"   Conflict at {conflict.path}: {conflict.message}")

    csharp = butler.generate_code(json_string, type_name="Post", style=CodeStyle.CSHARP)
    print(f"C# rendering is {len(csharp.source)} characters\n")

    # Load the generated module so the reverse direction can reflect it
    module = types.ModuleType("blog_types")
    sys.modules[module.__name__] = module
    exec(compile(result.source, "<blog_types>", "exec"), module.__dict__)

    serialized = butler.serialize_type(TypeHandle(qualified_name="Blog.Post", type=module.Post))
    print(f"Representative document for {serialized.qualified_name}:")
    print(serialized.json_string)


if __name__ == "__main__":
    main()
