#!/usr/bin/env python3

# Stands in for a compiler run with -M: prints a single make rule for the
# source file and exits with the status asked for by -fakecc-exit=N.

import os
import sys

target = None
source = None
status = 0
args = iter(sys.argv[1:])
for arg in args:
    if arg == '-MT':
        target = next(args)
    elif arg.startswith('-fakecc-exit='):
        status = int(arg.split('=', 1)[1])
    elif not arg.startswith('-'):
        source = arg

if source is None:
    sys.exit('fakecc: no input file')
if status != 0:
    print(f'fakecc: failing with {status}', file=sys.stderr)
    sys.exit(status)
if target is None:
    target = os.path.splitext(os.path.basename(source))[0] + '.o'
print(f'{target}: {source}')
