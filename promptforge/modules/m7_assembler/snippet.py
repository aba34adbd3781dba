"""react-three-fiber component source for a scene descriptor.

Convenience output only: the renderer may ignore it and consume the
SceneConfig / Mesh directly.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from promptforge.modules.m1_prompt_parser.models import AnimationSpec, AtmosphereConfig, MaterialConfig, SceneConfig
from promptforge.shared.vocabulary import AnimationType, BaseShape

COMPONENT_NAME = "Generated3DCreation"
_DEFAULT_LIGHT_POSITION = (0, 5, 5)


def _num(value: float) -> str:
    return f"{value:g}"


def _vec(values) -> str:
    return ", ".join(_num(v) for v in values)


def animation_code(animations: List[AnimationSpec]) -> str:
    lines: List[str] = []
    for anim in animations:
        if anim.type is AnimationType.ROTATE:
            lines.append(f"meshRef.current.rotation.y += {_num(anim.speed * 0.01)} * {_num(anim.intensity)};")
        elif anim.type is AnimationType.FLOAT:
            lines.append(f"meshRef.current.position.y = Math.sin(state.clock.elapsedTime * {_num(anim.speed)}) "
                         f"* {_num(anim.intensity)};")
        elif anim.type is AnimationType.PULSE:
            lines.append(f"const scale = 1 + Math.sin(state.clock.elapsedTime * {_num(anim.speed)}) "
                         f"* {_num(anim.intensity * 0.1)};")
            lines.append("meshRef.current.scale.setScalar(scale);")
    return "\n    ".join(lines) if lines else "// No animations"


def geometry_code(config: SceneConfig) -> str:
    sx, sy, sz = config.scale
    shape = config.base_shape
    if shape is BaseShape.BOX:
        return f"<boxGeometry args={{[{_vec((sx, sy, sz))}]}} />"
    if shape is BaseShape.CYLINDER:
        return f"<cylinderGeometry args={{[{_vec((sx, sx, sy * 2))}, 32]}} />"
    if shape is BaseShape.TORUS:
        return f"<torusGeometry args={{[{_vec((sx, sx * 0.3))}, 16, 100]}} />"
    if shape is BaseShape.CONE:
        return f"<coneGeometry args={{[{_vec((sx, sy * 2))}, 32]}} />"
    if shape is BaseShape.SPHERE:
        return f"<sphereGeometry args={{[{_num(sx)}, 32, 32]}} />"
    # procedural shapes ship as prebuilt vertex buffers
    return f"<bufferGeometry attach=\"geometry\" userData={{{{ shape: '{shape.value}' }}}} />"


def material_code(material: MaterialConfig) -> str:
    props = [f'color="{material.color}"', f"roughness={{{_num(material.roughness)}}}",
             f"metalness={{{_num(material.metalness)}}}"]
    if material.emissive:
        props.append(f'emissive="{material.emissive}"')
        props.append(f"emissiveIntensity={{{_num(material.emissive_intensity or 1)}}}")
    if material.transparent:
        props.append("transparent")
        props.append(f"opacity={{{_num(material.opacity or 1)}}}")
    if material.wireframe:
        props.append("wireframe")
    tag = "meshPhysicalMaterial" if material.transmission is not None else "meshStandardMaterial"
    if material.transmission is not None:
        props.append(f"transmission={{{_num(material.transmission)}}}")
        props.append(f"ior={{{_num(material.ior or 1.5)}}}")
    return f"<{tag} {' '.join(props)} />"


def atmosphere_code(atmosphere: AtmosphereConfig) -> str:
    lines: List[str] = []
    for light in atmosphere.lighting:
        pos = light.position or _DEFAULT_LIGHT_POSITION
        shadow = " castShadow" if light.cast_shadow else ""
        lines.append(f'<{light.type}Light color="{light.color}" intensity={{{_num(light.intensity)}}} '
                     f"position={{[{_vec(pos)}]}}{shadow} />")
    if atmosphere.fog:
        fog = atmosphere.fog
        lines.append(f"<fog attach=\"fog\" args={{['{fog.color}', {_num(fog.near)}, {_num(fog.far)}]}} />")
    return "\n      ".join(lines)


def generate_component_code(config: SceneConfig, prompt: str, created: Optional[datetime] = None) -> str:
    created = created or datetime.now(timezone.utc)
    position = _vec(config.position) if config.position else "0, 0, 0"
    prompt_text = prompt.replace('"', '\\"')
    return f"""import React, {{ useRef }} from 'react';
import {{ useFrame }} from '@react-three/fiber';
import * as THREE from 'three';

/**
 * Generated from prompt: "{prompt_text}"
 * Created: {created.isoformat()}
 */
export default function {COMPONENT_NAME}() {{
  const meshRef = useRef<THREE.Mesh>(null);

  useFrame((state) => {{
    if (!meshRef.current) return;

    {animation_code(config.animations)}
  }});

  return (
    <group>
      <mesh ref={{meshRef}} position={{[{position}]}}>
        {geometry_code(config)}
        {material_code(config.materials)}
      </mesh>

      {atmosphere_code(config.atmosphere)}
    </group>
  );
}}"""
