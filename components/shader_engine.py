import os

import glm
from OpenGL.GL import *

from config.path_config import shaders_dir
from utils.logger import get_logger

logger = get_logger("shader_engine")


class ShaderEngine:
    """
    ShaderEngine manages the creation, compilation, and linking of a vertex/fragment
    shader program and uploads named uniform values to it.
    It also handles #include directives, referencing a 'common' GLSL include directory.
    """
    def __init__(
        self,
        vertex_shader_path,
        fragment_shader_path,
        shader_base_dir=shaders_dir,
        common_dir_name="common",
    ):
        """
        Initialize the ShaderEngine.

        Args:
            vertex_shader_path (str): Path (relative to `shader_base_dir`) to the vertex shader.
            fragment_shader_path (str): Path (relative) to the fragment shader.
            shader_base_dir (str): Base directory for all shader files.
            common_dir_name (str): Subdirectory for common GLSL includes.
        """
        self.shader_base_dir = shader_base_dir
        self.common_dir_name = common_dir_name
        self.uniform_locations = {}

        self.shader_program = self.create_shader_program(vertex_shader_path, fragment_shader_path)

    # --------------------------------------------------------------------------
    # Public Methods for Using Programs
    # --------------------------------------------------------------------------
    def use_shader_program(self):
        """Activate the vertex/fragment shader program."""
        if self.shader_program:
            glUseProgram(self.shader_program)

    def delete_shader_programs(self):
        """
        Delete the shader program to free OpenGL resources.
        """
        if self.shader_program:
            glDeleteProgram(self.shader_program)
            self.shader_program = None
        self.uniform_locations.clear()

    # --------------------------------------------------------------------------
    # Uniform Setters
    # --------------------------------------------------------------------------
    def get_uniform_location(self, name):
        """
        Return the cached location of a uniform; -1 means the program has no such uniform.
        """
        if name not in self.uniform_locations:
            location = glGetUniformLocation(self.shader_program, name)
            if location == -1:
                logger.debug("Uniform '%s' not found in shader program", name)
            self.uniform_locations[name] = location
        return self.uniform_locations[name]

    def set_mat4_value(self, name, matrix):
        location = self.get_uniform_location(name)
        if location != -1:
            glUniformMatrix4fv(location, 1, GL_FALSE, glm.value_ptr(matrix))

    def set_vec2_value(self, name, value):
        location = self.get_uniform_location(name)
        if location != -1:
            vector = glm.vec2(*value)
            glUniform2fv(location, 1, glm.value_ptr(vector))

    def set_vec3_value(self, name, value):
        location = self.get_uniform_location(name)
        if location != -1:
            vector = glm.vec3(*value)
            glUniform3fv(location, 1, glm.value_ptr(vector))

    def set_vec4_value(self, name, value):
        location = self.get_uniform_location(name)
        if location != -1:
            vector = glm.vec4(*value)
            glUniform4fv(location, 1, glm.value_ptr(vector))

    def set_int_value(self, name, value):
        location = self.get_uniform_location(name)
        if location != -1:
            glUniform1i(location, int(value))

    def set_float_value(self, name, value):
        location = self.get_uniform_location(name)
        if location != -1:
            glUniform1f(location, float(value))

    def set_sampler2d_value(self, name, slot):
        """
        Point a sampler2D uniform at a texture unit slot. Negative slots (an
        unresolved texture tag) are not uploaded; GL rejects them.
        """
        if slot < 0:
            logger.debug("Skipping sampler '%s' for invalid slot %d", name, slot)
            return
        self.set_int_value(name, slot)

    # --------------------------------------------------------------------------
    # Creation of Shader Programs
    # --------------------------------------------------------------------------
    def create_shader_program(self, vertex_shader_path, fragment_shader_path):
        """
        Create and link a standard vertex/fragment shader program.
        """
        shaders = []

        if vertex_shader_path:
            vertex_shader = self._create_and_compile_shader(vertex_shader_path, GL_VERTEX_SHADER)
            shaders.append(vertex_shader)

        if fragment_shader_path:
            fragment_shader = self._create_and_compile_shader(fragment_shader_path, GL_FRAGMENT_SHADER)
            shaders.append(fragment_shader)

        shader_program = self._link_shader_program(shaders)

        # Cleanup after linking
        for shader in shaders:
            glDeleteShader(shader)

        logger.info("Linked shader program from %s and %s", vertex_shader_path, fragment_shader_path)
        return shader_program

    # --------------------------------------------------------------------------
    # Internal Utilities for Loading and Compiling Shaders
    # --------------------------------------------------------------------------
    def _create_and_compile_shader(self, shader_path, shader_type):
        """
        Load source from file, compile, and return the shader handle.
        """
        shader_source = self._load_shader_code(shader_path)
        return self._compile_shader(shader_source, shader_type)

    def _load_shader_code(self, shader_file):
        """
        Load shader code from file, then process #include directives.
        """
        full_path = os.path.join(self.shader_base_dir, shader_file)
        if not os.path.isfile(full_path):
            raise FileNotFoundError(f"Shader file not found: {full_path}")

        with open(full_path, "r", encoding="utf-8") as file:
            source = file.read()

        return self._process_includes(source, os.path.dirname(full_path))

    def _process_includes(self, source, current_dir):
        """
        Recursively process #include "filename" directives.

        Search order:
          1) current_dir
          2) shader_base_dir/common_dir_name
        """
        processed_lines = []

        for line in source.split("\n"):
            line_stripped = line.strip()
            if not line_stripped.startswith("#include"):
                processed_lines.append(line)
                continue

            start_idx = line_stripped.find('"')
            end_idx = line_stripped.find('"', start_idx + 1)
            if start_idx == -1 or end_idx == -1:
                raise RuntimeError('Malformed #include directive. Must be #include "filename"')

            include_filename = line_stripped[start_idx + 1:end_idx]

            include_path_local = os.path.join(current_dir, include_filename)
            fallback_path = os.path.join(self.shader_base_dir, self.common_dir_name, include_filename)
            if os.path.isfile(include_path_local):
                use_path = include_path_local
            elif os.path.isfile(fallback_path):
                use_path = fallback_path
            else:
                raise FileNotFoundError(
                    f"Included shader file not found in either:\n  {include_path_local}\n  {fallback_path}"
                )

            with open(use_path, "r", encoding="utf-8") as inc_file:
                inc_source = inc_file.read()

            processed_lines.append(self._process_includes(inc_source, os.path.dirname(use_path)))

        return "\n".join(processed_lines)

    def _compile_shader(self, source, shader_type):
        """
        Compile the GLSL source for a vertex or fragment shader.
        """
        shader = glCreateShader(shader_type)
        glShaderSource(shader, source)
        glCompileShader(shader)

        if not glGetShaderiv(shader, GL_COMPILE_STATUS):
            log = glGetShaderInfoLog(shader)
            shader_type_str = {
                GL_VERTEX_SHADER: "vertex",
                GL_FRAGMENT_SHADER: "fragment",
            }.get(shader_type, "unknown")
            glDeleteShader(shader)
            raise RuntimeError(f"Error compiling {shader_type_str} shader: {log.decode()}")

        return shader

    def _link_shader_program(self, shaders):
        """
        Link a set of compiled shaders into a single program.
        """
        shader_program = glCreateProgram()
        for shader in shaders:
            glAttachShader(shader_program, shader)

        glLinkProgram(shader_program)

        if not glGetProgramiv(shader_program, GL_LINK_STATUS):
            log = glGetProgramInfoLog(shader_program)
            glDeleteProgram(shader_program)
            raise RuntimeError(f"Error linking shader program: {log.decode()}")

        return shader_program
