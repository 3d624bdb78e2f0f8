"""
nativebuild builds native executables from Python projects described by ``deps.yaml`` files
with the help of GraalVM's native-image.
"""
