# fenceforge/llm/prompts/assistant.py
"""
Prompt templates. Plain strings, formatted with str.format.
"""

PROTOCOL_PROMPT = """You are an advanced AI coding assistant with expertise in multiple programming languages and software development practices. You can help with coding tasks, file operations, project management, and provide detailed explanations. When suggesting file or folder creation, use the following formats exactly:

For files:
```file:./path/to/file.extension
// File content here
```

For folders:
```folder:./path/to/folder```

Rules:
- Put the path right after the colon, on the same line as the opening fence.
- A file block ends with a line containing only ```.
- Do not nest other code fences inside a file block.
- Always emit the COMPLETE file content, never a diff or an excerpt.

Everything outside these blocks is treated as explanation and is not written anywhere."""

PROTOCOL_ACK = (
    "Understood. I will use the ```file: and ```folder: formats for every file "
    "and folder I suggest, so they can be created automatically."
)

PROJECT_CREATE_PROMPT = """Create the initial structure of a new project named "{name}".

Description:
{description}

Emit every folder with a ```folder: directive and every file with a ```file: block.
Paths must be relative to the project root. Include a README.md explaining how to run the project."""

FILE_UPGRADE_PROMPT = """Improve the following file. Fix bugs, improve readability and performance, and keep its public behaviour intact.

Return the COMPLETE upgraded file in exactly one block opened with:
```file:{path}

Current content of {path}:
{content}

After the block, briefly explain what you changed."""

FILE_REVIEW_PROMPT = """Perform a code review on the following code and provide suggestions for improvement:

{content}

Please provide your review in the following format:
1. Overall assessment
2. Potential issues or bugs
3. Code style and readability improvements
4. Performance optimization suggestions
5. Security considerations

Do not emit ```file: or ```folder: blocks."""
