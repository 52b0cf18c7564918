"""
Workshop step catalogue.

Static content for the "Setting up your Visual Studio" workshop. The state
machine only reads index, requires_input and command_text; the rest is for
whatever renders the steps.
"""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Step:
    """One stage of the onboarding sequence."""
    index: int
    title: str
    analogy: str
    description: str
    instruction: str
    button_text: str
    requires_input: bool = False
    command_text: str | None = None
    link: str | None = None
    alt_text: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_ALT_TEXT = "Reference visual placeholder."


WORKSHOP_STEPS: tuple[Step, ...] = (
    Step(
        index=0,
        title="Enter the Studio",
        analogy="Every great project starts with a signature.",
        description=(
            "Welcome to the Vibe Coding V-Team. Before we unlock the workbench, "
            "tell us your name so we can save your progress in the studio archives."
        ),
        instruction="Type your name below and hit 'Enter the Studio'.",
        button_text="Enter the Studio",
        requires_input=True,
    ),
    Step(
        index=1,
        title="The Master Workbench",
        analogy="VS Code isn't just an editor; it's your digital easel.",
        description=(
            "This is where your ideas take shape. It's designed to be customized, "
            "just like your physical desk."
        ),
        instruction=(
            "Download 'VS Code for Mac' from the official site. Drag it into your "
            "Applications folder and open it up!"
        ),
        button_text="I've set up my workbench",
        link="https://code.visualstudio.com/",
        alt_text="Drag the VS Code icon from Downloads into Applications on macOS.",
    ),
    Step(
        index=2,
        title="The Engine Room",
        analogy="Node.js is the electricity for your prototypes.",
        description=(
            "Your Mac is powerful, but Node.js gives it the 'logic' needed to run "
            "interactive websites. It stays invisible, but it makes everything move."
        ),
        instruction=(
            "Download the 'LTS' version (the green button). Run the installer just "
            "like any other app."
        ),
        button_text="The engine is purring",
        link="https://nodejs.org/",
        alt_text="Node.js website with the green LTS download button highlighted.",
    ),
    Step(
        index=3,
        title="The Teleportation Console",
        analogy="The Terminal is a shortcut, not a scary black box.",
        description=(
            "Instead of clicking through 10 folders, you can just tell your computer "
            "where to go. It's like using 'Command + K' but for your whole system."
        ),
        instruction=(
            "In VS Code, press 'Ctrl + `' (the key next to 1). Type 'node -v' and hit "
            "Enter. If a number appears, you've successfully summoned the console!"
        ),
        button_text="I've mastered the console",
        command_text="node -v",
        alt_text="In VS Code, open Terminal via Ctrl+` and run node -v to verify install.",
    ),
    Step(
        index=4,
        title="Spawning the Canvas",
        analogy="Vite is like an 'Auto-Layout' that sets up your whole project for you.",
        description=(
            "We are going to create a 'Vite' project. It's a modern, lightning-fast "
            "foundation that comes pre-packaged with everything a designer needs."
        ),
        instruction=(
            "Paste this into your terminal: 'npm create vite@latest my-vibe-app -- "
            "--template react'. Follow the prompts, then type 'cd my-vibe-app' and "
            "'npm install'."
        ),
        button_text="Canvas is ready",
        command_text="npm create vite@latest my-vibe-app -- --template react",
        alt_text="VS Code terminal showing Vite create command finishing and folder tree.",
    ),
    Step(
        index=5,
        title="The Microsoft Stencil Kit",
        analogy="Fluent UI is your set of pro-grade Microsoft components.",
        description=(
            "Why draw a button from scratch? We're installing the official Fluent "
            "library so you can use the same building blocks as the pros at Microsoft."
        ),
        instruction=(
            "Paste this: 'npm install @fluentui/react-components'. Then, type "
            "'npm run dev' to see your project go live in the browser!"
        ),
        button_text="It's alive!",
        command_text="npm install @fluentui/react-components && npm run dev",
        alt_text="Terminal running npm run dev and browser opening the default React page.",
    ),
    Step(
        index=6,
        title="The Master Joiner",
        analogy="You've officially unlocked the workshop.",
        description=(
            "The setup is done. You are no longer just a designer; you are a Vibe "
            "Coder. You have the workbench, the engine, and the stencils."
        ),
        instruction=(
            "Click below to claim your 'Master Joiner' badge and notify the V-Team "
            "of your success!"
        ),
        button_text="Claim My Badge",
    ),
)


def validate_steps(steps: tuple[Step, ...]) -> None:
    """Raise ValueError unless steps form a contiguous 0..N-1 sequence with N >= 2."""
    if len(steps) < 2:
        raise ValueError(f"Onboarding needs at least 2 steps, got {len(steps)}")
    for position, step in enumerate(steps):
        if step.index != position:
            raise ValueError(
                f"Step at position {position} has index {step.index}; "
                "indices must be contiguous from 0"
            )
