"""
This module contains the build pipeline of nativebuild.

It's separated into the following parts:

- deps.py: read and merge the dependency descriptors
- units.py: find the modules that have to be compiled
- compile_path.py: clear the scratch directory
- compiler.py: compile the modules into the scratch directory
- classpath.py: assemble the search path passed to native-image
- native_image.py: locate and call native-image
- builder.py: facade that runs the whole pipeline
"""
