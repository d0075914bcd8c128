"""内置默认技能。

技能目录不可用时加载这五个技能，保证注册表永不为空。
每次调用 builtin_skills() 都返回新对象，启用/禁用不会影响下一次加载。
"""

from typing import List

from vault_assistant.skills.models import Skill


def builtin_skills() -> List[Skill]:
    return [
        Skill(
            name="code-review",
            description="Review and analyze code for improvements",
            instructions=(
                "You are a code review expert. When asked to review code:\n"
                "1. Analyze the code structure and readability\n"
                "2. Identify potential bugs or issues\n"
                "3. Suggest improvements for performance and maintainability\n"
                "4. Check for security vulnerabilities\n"
                "Provide constructive feedback with specific suggestions."
            ),
            triggers=["review code", "analyze code", "code review"],
        ),
        Skill(
            name="refactor",
            description="Refactor and improve existing code",
            instructions=(
                "You are a refactoring expert. When asked to refactor:\n"
                "1. Preserve the original functionality\n"
                "2. Improve code readability and maintainability\n"
                "3. Apply SOLID principles\n"
                "4. Reduce code duplication\n"
                "5. Suggest incremental improvements\n"
                "Explain your refactoring decisions."
            ),
            triggers=["refactor", "improve code", "restructure"],
        ),
        Skill(
            name="explain",
            description="Explain code and concepts clearly",
            instructions=(
                "You are a programming educator. When asked to explain:\n"
                "1. Break down complex concepts into simple parts\n"
                "2. Use analogies where helpful\n"
                "3. Provide concrete examples\n"
                "4. Consider the user's skill level\n"
                "5. Be thorough but concise"
            ),
            triggers=["explain", "what does", "how does", "why is"],
        ),
        Skill(
            name="test",
            description="Generate tests for code",
            instructions=(
                "You are a testing expert. When asked to create tests:\n"
                "1. Cover edge cases and error conditions\n"
                "2. Use descriptive test names\n"
                "3. Follow AAA pattern (Arrange, Act, Assert)\n"
                "4. Include both positive and negative test cases\n"
                "5. Suggest testing strategies"
            ),
            triggers=["test", "write tests", "generate tests", "unit test"],
        ),
        Skill(
            name="doc",
            description="Generate documentation for code",
            instructions=(
                "You are a technical writer. When asked to document:\n"
                "1. Write clear, concise documentation\n"
                "2. Include code examples where helpful\n"
                "3. Document parameters, return values, and exceptions\n"
                "4. Keep docs in sync with code\n"
                "5. Use appropriate format (docstrings, README, etc.)"
            ),
            triggers=["document", "docs", "readme", "generate docs"],
        ),
    ]
