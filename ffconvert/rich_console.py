"""
Rich console output and interactive menus
"""

from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .exceptions import InvalidSelectionError
from .file_utils import format_file_size
from .models import (
    CapabilitySet, CodecPlan, ConversionRequest, HardwareCapability,
    HardwareSnapshot, MediaProbe, OutputKind, QualityPreset, UNKNOWN,
)

# Global console instance
console = Console()

CAPABILITY_DESCRIPTIONS = {
    HardwareCapability.NVENC: 'NVIDIA NVENC encoder',
    HardwareCapability.QSV: 'Intel Quick Sync encoder',
    HardwareCapability.AMF: 'AMD AMF encoder',
    HardwareCapability.CUDA_DECODE: 'NVIDIA CUDA/CUVID decoding',
}

OUTPUT_KIND_DESCRIPTIONS = {
    OutputKind.MP4: 'MP4 (H.264 + AAC)',
    OutputKind.WEBM: 'WebM (VP9 + Opus)',
    OutputKind.MP3: 'MP3 (audio only)',
    OutputKind.WAV: 'WAV (audio only, PCM 16-bit)',
}

PRESET_DESCRIPTIONS = {
    QualityPreset.BEST: 'Best quality (slowest)',
    QualityPreset.BALANCED: 'Balanced',
    QualityPreset.FASTEST: 'Fastest (lower quality)',
}


class RichOutput:
    """Rich console output manager"""

    def __init__(self, output_console: Optional[Console] = None):
        self.console = output_console or console

    def print_header(self, title: str):
        """Print application header"""
        self.console.print(Panel.fit(
            f"[bold blue]{title}[/bold blue]",
            box=box.DOUBLE,
            border_style="blue"
        ))

    def print_capabilities(self, capabilities: CapabilitySet):
        """Print detected hardware acceleration"""
        if capabilities.is_empty:
            self.console.print("[bold yellow]No hardware acceleration detected - using software codecs[/bold yellow]")
            return

        table = Table(show_header=True, header_style="bold magenta", box=box.ROUNDED)
        table.add_column("Capability", style="cyan")
        table.add_column("Description", style="white")
        for tag in capabilities.sorted_tags():
            table.add_row(tag.value, f"[green]{CAPABILITY_DESCRIPTIONS[tag]}[/green]")
        self.console.print(Panel(
            table,
            title="[bold green]Hardware acceleration detected[/bold green]",
            border_style="green"
        ))

    def print_plan(self, request: ConversionRequest, plan: CodecPlan,
                   output_path: Path, debug_cmd: Optional[str] = None):
        """Print the conversion plan in a formatted table"""
        table = Table(show_header=True, header_style="bold magenta", box=box.ROUNDED)
        table.add_column("Property", style="cyan", width=20)
        table.add_column("Value", style="white")

        table.add_row("Input", escape(str(request.input_path)))
        try:
            table.add_row("Input Size", format_file_size(request.input_path.stat().st_size))
        except OSError:
            pass
        table.add_row("Output Format", OUTPUT_KIND_DESCRIPTIONS[request.output_kind])
        table.add_row("Output", escape(str(output_path)))

        if plan.is_audio_only:
            table.add_row("Video Codec", "[dim]none (audio only)[/dim]")
        else:
            video_info = plan.video_codec or "[red]None[/red]"
            if plan.video_preset:
                video_info += f" (preset {plan.video_preset})"
            table.add_row("Video Codec", video_info)
        table.add_row("Audio Codec", plan.audio_codec or "[red]None[/red]")

        if plan.extra_decoder_flags or plan.decoder_override:
            decoder = plan.decoder_override or "automatic"
            table.add_row("HW Decoding", f"[green]{decoder}[/green]")

        self.console.print(table)

        if debug_cmd:
            self.console.print(Panel(
                debug_cmd,
                title="[bold yellow]FFmpeg Command[/bold yellow]",
                border_style="yellow"
            ))

    def print_hardware(self, snapshot: HardwareSnapshot):
        """Print the hardware snapshot"""
        table = Table(show_header=True, header_style="bold magenta", box=box.ROUNDED)
        table.add_column("Component", style="cyan", width=12)
        table.add_column("Details", style="white")

        cpu = snapshot.cpu
        table.add_row("CPU", f"{escape(cpu.name)} [dim]({escape(cpu.vendor)})[/dim]")
        table.add_row("Cores", f"{_or_unknown(cpu.cores)} cores / {_or_unknown(cpu.threads)} threads")

        ram = snapshot.ram
        ram_total = format_file_size(ram.total_bytes) if ram.total_bytes else UNKNOWN
        ram_speed = f"{ram.speed_mhz} MHz" if ram.speed_mhz else UNKNOWN
        table.add_row("RAM", f"{ram_total} @ {ram_speed}")

        if snapshot.gpus:
            for gpu in snapshot.gpus:
                memory = format_file_size(gpu.memory_bytes) if gpu.memory_bytes else UNKNOWN
                table.add_row("GPU", f"{escape(gpu.name)} ({memory})")
        else:
            table.add_row("GPU", UNKNOWN)

        self.console.print(Panel(
            table,
            title="[bold blue]System Information[/bold blue]",
            border_style="blue"
        ))

    def print_media(self, probe: MediaProbe):
        """Print the ffprobe summary for a file"""
        table = Table(show_header=True, header_style="bold magenta", box=box.ROUNDED)
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Type", style="white")
        table.add_column("Codec", style="white")
        for stream in probe.streams:
            table.add_row(str(stream.index), stream.codec_type or UNKNOWN, stream.codec_name or UNKNOWN)

        duration = f"{probe.duration:.1f}s" if probe.duration is not None else UNKNOWN
        size = format_file_size(probe.size) if probe.size is not None else UNKNOWN
        self.console.print(Panel(
            table,
            title=f"[bold blue]{escape(probe.file_path.name)}[/bold blue] [dim]{duration}, {size}[/dim]",
            border_style="blue"
        ))

    def print_success(self, message: str = "Conversion completed!"):
        """Print success message"""
        self.console.print(f"[bold green]✓ {message}[/bold green]")

    def print_error(self, message: str, details: Optional[str] = None):
        """Print error message"""
        self.console.print(f"[bold red]✗ {message}[/bold red]")
        if details:
            self.console.print(f"[red]Details: {details}[/red]")

    def print_warning(self, message: str):
        """Print warning message"""
        self.console.print(f"[bold yellow]⚠ {message}[/bold yellow]")

    def print_info(self, message: str):
        """Print info message"""
        self.console.print(f"[bold cyan]ℹ {message}[/bold cyan]")

    def print_interrupted(self, message: str = "Conversion interrupted"):
        self.console.print(f"\n[bold red]⏹ {message}[/bold red]")

    def ask_output_kind(self) -> OutputKind:
        """Numbered format menu; re-prompts until a valid choice is entered"""
        self.console.print("\n[bold]Select output format:[/bold]")
        for kind in OutputKind:
            self.console.print(f"  [bold cyan]{kind.menu_number}[/bold cyan]) {OUTPUT_KIND_DESCRIPTIONS[kind]}")

        while True:
            choice = _read_line(f"Choice (1-{len(OutputKind)}): ")
            kind = OutputKind.from_menu_choice(choice)
            if kind is not None:
                return kind
            self.console.print(f"[red]Invalid choice '{escape(choice.strip())}'. Please enter a number between 1 and {len(OutputKind)}.[/red]")

    def ask_quality_preset(self) -> QualityPreset:
        """Preset menu for hardware encoding; anything unrecognized means balanced"""
        self.console.print("\n[bold]Select encoding quality:[/bold]")
        for number, preset in enumerate(QualityPreset, start=1):
            self.console.print(f"  [bold cyan]{number}[/bold cyan]) {PRESET_DESCRIPTIONS[preset]}")

        choice = _read_line(f"Choice (1-{len(QualityPreset)}, default 2): ")
        preset = QualityPreset.from_menu_choice(choice)
        if preset is None:
            if choice.strip():
                self.print_warning(f"Unrecognized choice '{escape(choice.strip())}', using balanced")
            return QualityPreset.BALANCED
        return preset

    def ask_confirmation(self, prompt: str = "Continue?") -> bool:
        """Ask a yes/no question"""
        options_text = "[dim]([/dim][bold green]y[/bold green][dim]es / [/dim][bold red]n[/bold red][dim]o)[/dim]"
        self.console.print(f"{prompt} {options_text}")

        while True:
            choice = _read_line("").lower().strip()
            if choice in ['y', 'yes']:
                return True
            elif choice in ['n', 'no', '']:
                return False
            else:
                self.console.print("[red]Please enter: y/n[/red]")


def _read_line(prompt: str) -> str:
    try:
        return input(prompt)
    except EOFError:
        raise InvalidSelectionError('No selection made (end of input)') from None


def _or_unknown(value) -> str:
    return UNKNOWN if value is None else str(value)


# Global rich output instance
rich_output = RichOutput()
