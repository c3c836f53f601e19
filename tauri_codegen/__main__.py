# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import sys

from tauri_codegen.cli import main

if __name__ == "__main__":
	sys.exit(main())
