from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from quiz_catalog.catalog.models import Quiz
from quiz_catalog.system import QuizSystem

app = typer.Typer(help="Browse the quiz catalog and take quizzes in the terminal.")
console = Console()


def _load_system(config: Optional[Path]) -> QuizSystem:
    """Instantiate `QuizSystem` with an optional config path."""
    return QuizSystem.from_config(config)


@app.command()
def categories(
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """List every category currently in the catalog."""
    system = _load_system(config)
    for name in sorted(system.registry.list_categories()):
        console.print(f"- {name}", highlight=False)


@app.command()
def quizzes(
    category: str = typer.Argument(...),
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """List quiz titles in a category."""
    system = _load_system(config)
    titles = system.registry.list_quizzes(category)
    if not titles:
        console.print(f"No quizzes in '{category}'.", highlight=False)
        return
    for title in titles:
        console.print(f"- {title}", highlight=False)


def _ask(quiz: Quiz) -> int:
    correct = 0
    for number, question in enumerate(quiz.questions, start=1):
        choices = question.answer_choices()
        console.print(f"---\n(Q{number}) {question.prompt}:\n", highlight=False)
        for index, choice in enumerate(choices, start=1):
            console.print(f"{index}: {choice}", highlight=False)

        while True:
            raw = typer.prompt("Write the number of your choice")
            try:
                selected = int(raw)
            except ValueError:
                selected = 0
            if 1 <= selected <= len(choices):
                break
            console.print("Please enter the number of one of the answer choices.")

        if question.is_correct(choices[selected - 1]):
            correct += 1
            console.print("\n[green]Correct![/green]\n")
        else:
            console.print("\n[red]Incorrect.[/red]\n")
            console.print(
                f"The correct answer was:\n\n{question.prompt}\n-> {question.correct_answer}\n",
                highlight=False,
            )
    return correct


@app.command()
def take(
    category: str = typer.Argument(...),
    title: str = typer.Argument(...),
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """
    Take a quiz interactively and print the final score.

    Random quizzes are refreshed from the trivia provider on lookup; if the provider
    is unavailable the previous content (possibly empty) is used.
    """
    system = _load_system(config)
    quiz = system.registry.get_quiz(category, title)
    if quiz is None:
        console.print(f"[red]No quiz '{title}' in '{category}'.[/red]")
        raise typer.Exit(code=1)
    if not quiz.questions:
        console.print("This quiz has no questions right now. Try again in a few seconds.")
        raise typer.Exit(code=1)

    console.print(
        f"-----\nCategory: {quiz.category}\nTitle: {quiz.title}\n"
        f"Time limit: {quiz.time_limit}s\n",
        highlight=False,
    )
    correct = _ask(quiz)
    total = quiz.num_questions
    console.print(
        f"Your score is:\n\n({correct} / {total}) = {100 * correct / total:.2f}%",
        highlight=False,
    )
    console.print("Thank you for taking the quiz!")


if __name__ == "__main__":
    app()
