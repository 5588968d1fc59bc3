"""Prompt templates for commit message generation."""

from typing import Optional


class PromptTemplates:
    """Instruction and input templates sent with the generation request."""

    @staticmethod
    def instructions(document_name: str = "diff.txt") -> str:
        """Generate the system instructions.

        Args:
            document_name: Name the diff is referred to by

        Returns:
            Instruction text
        """
        return (
            f"You are a commit message generator. Given the given {document_name}, "
            "propose commit message candidates as function calls.\n"
            f"Each commit message MUST represent the COMPLETE of {document_name} by itself. "
            "It is not acceptable to mention only part of the change."
        )

    @staticmethod
    def request_input(
        count: int,
        diff: Optional[str] = None,
        document_name: str = "diff.txt",
    ) -> str:
        """Generate the user input for the generation request.

        Args:
            count: Number of candidates to ask for
            diff: Diff text to inline, or None when the model retrieves it
            document_name: Name the diff is referred to by

        Returns:
            Formatted input
        """
        prompt = (
            f"Please analyze the {document_name} and generate "
            f"{count} commit message candidates."
        )
        if diff is not None:
            prompt += f"\n\n```{document_name}\n{diff}\n```"
        return prompt
