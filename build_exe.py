"""
Build script for creating standalone executable
Run with: python build_exe.py
"""
import subprocess
import sys

MODULES = [
    'archive_data.py',
    'archive_graph.py',
    'filter_projection.py',
    'force_layout.py',
    'interaction_state.py',
    'network_config.py',
    'tag_connectivity.py',
    'tag_ordering.py',
    'viewport_adapter.py',
]


def build_exe():
    """Build the interactive window with PyInstaller"""

    print("Building Image Archive Network executable...")

    # Windows uses ';' between source and destination, everything else ':'
    separator = ';' if sys.platform.startswith('win') else ':'
    cmd = [
        sys.executable, "-m", "PyInstaller",
        "--name=Image_Archive_Network",
        "--onefile",
        "--windowed",
        "--clean",
    ]
    cmd += [f"--add-data={module}{separator}." for module in MODULES]
    cmd.append("archive_network_gui.py")

    try:
        subprocess.run(cmd, check=True)
        print("\nBuild complete!")
        print("Executable location: dist/Image_Archive_Network")
    except subprocess.CalledProcessError as e:
        print(f"\nBuild failed: {e}")
        print("\nMake sure PyInstaller is installed:")
        print("  pip install pyinstaller")
        sys.exit(1)


if __name__ == "__main__":
    build_exe()
