"""
Default configuration values and profiles.

Provides the built-in validation battery and provisioning profiles for
an Overdrive checkout (Rust core, Tauri desktop app, pnpm workspace).
"""

from typing import Any, Dict, List

RUST_MIN_VERSION = "1.81.0"
NODE_MIN_VERSION = "18.18.0"
PNPM_MIN_VERSION = "9.4.0"

ANDROID_TARGETS = [
    "aarch64-linux-android",
    "armv7-linux-androideabi",
    "x86_64-linux-android",
]


def get_default_tools() -> List[Dict[str, Any]]:
    """Get the toolchain requirements checked by validate."""
    return [
        {
            "executable": "rustc",
            "label": "Rust compiler",
            "min_version": RUST_MIN_VERSION,
            "hint": "Update Rust: rustup update",
        },
        {
            "executable": "cargo",
            "label": "Cargo package manager",
            "min_version": RUST_MIN_VERSION,
            "hint": "Update Rust: rustup update",
        },
        {
            "executable": "node",
            "label": "Node.js",
            "min_version": NODE_MIN_VERSION,
            "hint": "Update Node.js with your preferred Node.js version manager",
        },
        {
            "executable": "pnpm",
            "label": "pnpm package manager",
            "min_version": PNPM_MIN_VERSION,
            "hint": "Install pnpm: https://pnpm.io/installation",
        },
        {"executable": "git", "label": "Git", "required": False},
        {"executable": "clang", "label": "Clang compiler", "required": False},
        {"executable": "lld", "label": "LLD linker", "required": False},
    ]


def get_default_system_tools() -> List[Dict[str, Any]]:
    """Get the Linux build tools checked by validate."""
    return [
        {"executable": "gcc", "label": "GCC compiler", "required": False},
        {"executable": "pkg-config", "label": "pkg-config", "required": False},
    ]


def get_default_paths() -> List[Dict[str, Any]]:
    """Get the project files and directories checked by validate."""
    return [
        # Project structure
        {"path": "Cargo.toml", "label": "Root Cargo.toml"},
        {"path": "package.json", "label": "Root package.json"},
        {"path": "core/Cargo.toml", "label": "Core Cargo.toml"},
        {"path": "core/prisma/schema.prisma", "label": "Prisma schema"},
        {"path": "apps/desktop/src-tauri/Cargo.toml", "label": "Desktop app Cargo.toml"},
        {"path": "core", "kind": "directory", "label": "Core directory"},
        {"path": "crates", "kind": "directory", "label": "Crates directory"},
        {"path": "apps/desktop", "kind": "directory", "label": "Desktop app directory"},
        {"path": "interface", "kind": "directory", "label": "Interface directory"},
        # Generated code
        {
            "path": "crates/prisma/src/prisma/mod.rs",
            "label": "Prisma client (main)",
            "section": "Generated Code",
            "hint": "Generate it with: pnpm prep",
        },
        {
            "path": "crates/prisma/src/prisma/_prisma.rs",
            "label": "Prisma client (core)",
            "section": "Generated Code",
            "hint": "Generate it with: pnpm prep",
        },
        {
            "path": "crates/prisma/src/prisma_sync/mod.rs",
            "label": "Prisma sync generator",
            "section": "Generated Code",
            "hint": "Generate it with: pnpm prep",
        },
        # Node.js dependencies
        {
            "path": "node_modules",
            "kind": "directory",
            "label": "Node.js dependencies",
            "section": "Node.js Dependencies",
            "found_message": "Node.js dependencies installed",
            "missing_message": "Node.js dependencies not installed",
            "hint": "Run 'pnpm i'",
        },
        {
            "path": "node_modules/@tauri-apps",
            "kind": "directory",
            "label": "Tauri dependencies",
            "section": "Node.js Dependencies",
            "found_message": "Tauri dependencies found",
            "required": False,
            "depends_on": "node_modules",
            "missing_message": "Tauri dependencies not found in node_modules",
        },
        {
            "path": "node_modules/.bin/prisma",
            "label": "Prisma CLI",
            "section": "Node.js Dependencies",
            "found_message": "Prisma CLI available",
            "required": False,
            "depends_on": "node_modules",
            "missing_message": "Prisma CLI not found",
        },
        # Cargo dependencies
        {
            "path": "Cargo.lock",
            "label": "Cargo.lock",
            "section": "Cargo Dependencies",
            "required": False,
            "missing_message": "Cargo.lock not found (dependencies may not be resolved)",
        },
        {
            "path": "target",
            "kind": "directory",
            "label": "Target directory",
            "section": "Cargo Dependencies",
            "required": False,
            "missing_message": "Target directory not found (will be created on first build)",
        },
        {
            "path": "target/debug/prisma",
            "label": "Prisma CLI binary",
            "section": "Cargo Dependencies",
            "found_message": "Prisma CLI binary built",
            "required": False,
            "depends_on": "target",
            "missing_message": "Prisma CLI binary not built (will be built on first use)",
        },
    ]


def get_default_libraries() -> List[Dict[str, Any]]:
    """Get the pkg-config libraries checked on Linux."""
    return [
        {
            "module": "gtk+-3.0",
            "label": "GTK+ 3.0 development libraries",
            "packages": {"apt": "libgtk-3-dev", "pacman": "gtk3", "dnf": "gtk3-devel"},
        },
        {
            "module": "webkit2gtk-4.1",
            "label": "WebKit2GTK development libraries",
            "packages": {
                "apt": "libwebkit2gtk-4.1-dev",
                "pacman": "webkit2gtk-4.1",
                "dnf": "webkit2gtk4.1-devel",
            },
        },
        {
            "module": "openssl",
            "label": "OpenSSL development libraries",
            "packages": {"apt": "libssl-dev", "pacman": "openssl", "dnf": "openssl-devel"},
        },
    ]


def get_default_probes() -> List[Dict[str, Any]]:
    """Get the build probes run at the end of validate."""
    return [
        {
            "id": "core-compiles",
            "command": ["cargo", "check", "-p", "sd-core", "--quiet"],
            "label": "Rust core compilation",
            "timeout": 30,
            "announce": "Testing Rust core compilation...",
            "success_message": "Rust core compiles successfully",
            "failure_message": "Rust core compilation failed",
            "hint": "Run 'cargo check -p sd-core' for detailed error information",
        },
        {
            "id": "pnpm-workspace",
            "command": ["pnpm", "--version"],
            "label": "pnpm workspace",
            "timeout": 10,
            "announce": "Testing pnpm workspace...",
            "success_message": "pnpm workspace accessible",
            "failure_message": "pnpm workspace test failed",
        },
    ]


def get_desktop_probes() -> List[Dict[str, Any]]:
    """Get the desktop app build probes run by validate --desktop."""
    return [
        {
            "id": "pnpm-install",
            "command": ["pnpm", "install", "--frozen-lockfile"],
            "label": "pnpm install",
            "section": "Workspace Validation",
            "timeout": 900,
            "announce": "Testing: pnpm install",
            "hint": "Run 'pnpm install' to refresh pnpm-lock.yaml",
        },
        {
            "id": "pnpm-prep",
            "command": ["pnpm", "prep"],
            "label": "Prisma generation and codegen",
            "section": "Workspace Validation",
            "timeout": 900,
            "announce": "Testing: Prisma generation and codegen",
        },
        {
            "id": "core-check",
            "command": ["cargo", "check", "-p", "sd-core"],
            "label": "Rust core compilation check",
            "section": "Build System Validation",
            "timeout": 1800,
            "announce": "Testing: Rust core compilation check",
            "hint": "Run 'cargo check -p sd-core' for detailed error information",
        },
        {
            "id": "desktop-typecheck",
            "command": ["pnpm", "desktop", "typecheck"],
            "label": "TypeScript type checking",
            "section": "Build System Validation",
            "timeout": 900,
            "announce": "Testing: TypeScript type checking",
        },
        {
            "id": "desktop-build",
            "command": ["pnpm", "desktop", "build"],
            "label": "Desktop app build",
            "section": "Build System Validation",
            "timeout": 1800,
            "announce": "Testing: Desktop app build",
        },
    ]


def get_desktop_paths() -> List[Dict[str, Any]]:
    """Get the files the desktop app cannot build without."""
    files = [
        "apps/desktop/package.json",
        "apps/desktop/src-tauri/Cargo.toml",
        "core/Cargo.toml",
        "packages/client/package.json",
        "packages/ui/package.json",
        "interface/package.json",
    ]
    return [
        {
            "path": path,
            "section": "Essential Files Check",
            "found_message": f"FOUND: {path}",
            "missing_message": f"MISSING: {path}",
        }
        for path in files
    ]
def get_default_prerequisites() -> List[Dict[str, Any]]:
    """Get the tools setup requires before it installs anything."""
    return [
        {
            "executable": "pnpm",
            "label": "pnpm",
            "hint": "You must use pnpm for this project. Install pnpm: https://pnpm.io/installation",
        },
        {"executable": "rustc", "label": "Rust", "hint": "Install Rust: https://rustup.rs"},
        {"executable": "cargo", "label": "Cargo", "hint": "Install Rust: https://rustup.rs"},
        {
            "executable": "rustc",
            "label": "Rust",
            "min_version": RUST_MIN_VERSION,
            "hint": "Update Rust: rustup update",
        },
        {
            "executable": "node",
            "label": "Node.js",
            "min_version": NODE_MIN_VERSION,
            "required": False,
        },
    ]


# ============================================================
# Provisioning Profiles
# ============================================================

def get_base_profile() -> Dict[str, Any]:
    """System dependencies for desktop development."""
    return {
        "description": "System libraries and build tools for the desktop app",
        "packages": {
            "apt": [
                # Tauri
                "build-essential", "curl", "wget", "file", "openssl", "libssl-dev",
                "libgtk-3-dev", "librsvg2-dev", "libwebkit2gtk-4.1-dev",
                "libayatana-appindicator3-dev", "libxdo-dev", "libdbus-1-dev",
                # gstreamer for webkit video playback
                "gstreamer1.0-plugins-good", "gstreamer1.0-plugins-ugly",
                "libgstreamer1.0-dev", "libgstreamer-plugins-base1.0-dev",
                # *-sys crates
                "llvm-dev", "libclang-dev", "clang", "nasm", "perl",
                "libvips42",
            ],
            "pacman": [
                "base-devel", "curl", "wget", "file", "openssl", "gtk3", "librsvg",
                "webkit2gtk-4.1", "libayatana-appindicator", "xdotool", "dbus",
                "gst-plugins-base", "gst-plugins-good", "gst-plugins-ugly",
                "clang", "nasm", "perl",
                "libvips",
            ],
            "dnf": [
                "openssl", "webkit2gtk4.1-devel", "openssl-devel", "curl", "wget", "file",
                "libappindicator-gtk3-devel", "librsvg2-devel", "libxdo-devel", "dbus-devel",
                "gstreamer1-devel", "gstreamer1-plugins-base-devel", "gstreamer1-plugins-good",
                "gstreamer1-plugins-good-extras", "gstreamer1-plugins-ugly-free",
                "clang", "clang-devel", "nasm", "perl-core",
                "vips",
            ],
        },
        "groups": {
            "dnf": ["C Development Tools and Libraries", "Development Tools"],
        },
        "extra_steps": [
            {
                "kind": "cargo_install",
                "crates": ["cargo-watch"],
                "skip_in_ci": True,
            },
        ],
    }


def get_android_profile() -> Dict[str, Any]:
    """Cross-compilation toolchain for Android."""
    return {
        "description": "Rust targets and tools for Android builds",
        "extra_steps": [
            {
                "kind": "require_tool",
                "tool": "python3",
                "alternatives": ["python"],
                "min_version": "3.0",
                "purpose": "Android development",
                "hint": "Ensure 'python3' is available in your $PATH and try again.",
            },
            {
                "kind": "require_tool",
                "tool": "rustup",
                "purpose": "cross-compiling Rust to Android targets",
                "hint": "Install rustup: https://rustup.rs",
            },
            {
                "kind": "toolchain_targets",
                "tool": "rustup",
                "description": "Install Android targets for Rust",
                "targets": list(ANDROID_TARGETS),
            },
            {
                "kind": "cargo_install",
                "crates": ["cargo-ndk"],
                "skip_in_ci": True,
            },
        ],
        "notes": [
            "Install Android Studio and SDK",
            "Set up Android NDK (version 26.1.10909125 recommended)",
            "Configure ANDROID_HOME and NDK environment variables",
        ],
    }


def get_workspace_profile() -> Dict[str, Any]:
    """Node.js dependencies and generated code for the workspace."""
    return {
        "description": "Install Node.js dependencies and prepare the build",
        "extra_steps": [
            {
                "kind": "require_tool",
                "tool": "pnpm",
                "purpose": "installing Node.js dependencies",
                "hint": "Install pnpm first: https://pnpm.io/installation",
            },
            {"kind": "command", "command": ["pnpm", "i"], "description": "Install Node.js dependencies"},
            {"kind": "command", "command": ["pnpm", "prep"], "description": "Prepare build environment"},
        ],
    }


PROFILE_TEMPLATES: Dict[str, Any] = {
    "base": get_base_profile,
    "android": get_android_profile,
    "workspace": get_workspace_profile,
}


def get_default_config() -> Dict[str, Any]:
    """Get the complete default configuration."""
    return {
        "project_name": "Overdrive",
        "project_markers": ["Cargo.toml", "package.json"],
        "tools": get_default_tools(),
        "system_tools": get_default_system_tools(),
        "paths": get_default_paths(),
        "libraries": get_default_libraries(),
        "probes": get_default_probes(),
        "desktop_probes": get_desktop_probes(),
        "desktop_paths": get_desktop_paths(),
        "prerequisites": get_default_prerequisites(),
        "profiles": {name: factory() for name, factory in PROFILE_TEMPLATES.items()},
        "base_profile": "base",
        "verification_probe": "core-compiles",
        "verification_hint": (
            "This might be normal if dependencies aren't installed yet. "
            "Run 'pnpm i && pnpm prep' to install dependencies."
        ),
        "probe_timeout": 10,
        "install_timeout": 1800,
        "next_steps": [
            "Run 'pnpm tauri dev' to start the development server",
            "The app should launch and be ready for development",
        ],
        "common_fixes": [
            "Install missing dependencies with: readiness setup",
            "Install Node.js dependencies: pnpm i",
            "Update Rust: rustup update",
            "Update Node.js: use your preferred Node.js version manager",
        ],
        "setup_next_steps": [
            "Install Node.js dependencies: pnpm i",
            "Prepare the build: pnpm prep",
            "Start development: pnpm tauri dev",
            "Validate the environment: readiness validate",
        ],
    }
